from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from glycotrack.api.routes import router as api_router
from glycotrack.config.settings import Settings
from glycotrack.startup import create_lifespan
from glycotrack.utils.logger import configure_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Explicit settings. When omitted, they are read from the
            .env file and the process environment.
    """
    if settings is None:
        settings = Settings.from_env()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="HbA1c Report Tracker",
        description="Upload medical reports, get AI summaries and follow HbA1c trends over time",
        version="1.0.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc UI
        lifespan=create_lifespan(settings),
    )

    # Wildcard origins cannot be combined with credentials
    allow_all = "*" in settings.frontend_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.frontend_origins,
        allow_credentials=not allow_all,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/", response_class=PlainTextResponse)
    async def health() -> str:
        return "Backend is running"

    app.include_router(api_router, prefix="/api")
    app.state.settings = settings

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("glycotrack.main:app", host="0.0.0.0", port=app.state.settings.port)
