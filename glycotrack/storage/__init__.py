from glycotrack.config.settings import SupabaseSettings
from glycotrack.storage.base import ReportStore
from glycotrack.storage.memory_store import InMemoryReportStore
from glycotrack.storage.supabase_store import SupabaseReportStore, get_supabase_client
from glycotrack.utils.logger import logger


def create_report_store(settings: SupabaseSettings) -> ReportStore:
    """
    Build the report store for the given settings.

    Falls back to an in-memory store when Supabase is not configured.
    """
    if not settings.configured:
        logger.warning("Supabase is not configured; reports will be kept in memory only")
        return InMemoryReportStore()

    logger.info("Using Supabase report store")
    return SupabaseReportStore(get_supabase_client(settings))


__all__ = ["ReportStore", "InMemoryReportStore", "SupabaseReportStore", "create_report_store"]
