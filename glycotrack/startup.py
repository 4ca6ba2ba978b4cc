"""
Application Startup Module

Builds the long-lived collaborators (report store, LLM client, pipeline) when
the application starts and releases them when it shuts down.
"""
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable

from fastapi import FastAPI

from glycotrack.config.settings import Settings
from glycotrack.llm.anthropic_client import AnthropicClient
from glycotrack.services.report_pipeline import ReportPipeline
from glycotrack.storage import create_report_store
from glycotrack.utils.logger import logger


def create_lifespan(settings: Settings) -> Callable[[FastAPI], AsyncContextManager[None]]:
    """
    Creates the lifespan handler for FastAPI.
    
    Args:
        settings: Settings the collaborators are built from

    Returns:
        An async context manager factory run around the application's lifetime
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info("Starting application initialization...")

        store = create_report_store(settings.supabase)

        if not settings.anthropic.api_key:
            logger.warning("ANTHROPIC_API_KEY is not set; report uploads will fail until it is configured")
        llm_client = AnthropicClient(settings.anthropic)

        app.state.store = store
        app.state.llm_client = llm_client
        app.state.pipeline = ReportPipeline(
            store=store,
            summarizer=llm_client,
            history_limit=settings.history_limit,
            summaries_limit=settings.summaries_limit,
        )
        logger.info("Application initialization completed")

        try:
            yield
        finally:
            logger.info("Shutting down application...")
            await llm_client.aclose()
            logger.info("Application shutdown completed")

    return lifespan
