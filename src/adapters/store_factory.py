"""Factory for creating metadata store instances."""

from typing import cast

from src.adapters.sqlite_metadata_store import SQLiteMetadataStore
from src.config.logging_config import get_logger
from src.config.settings import Settings
from src.ports.metadata_store import MetadataStorePort

logger = get_logger(__name__)


def create_metadata_store(settings: Settings) -> MetadataStorePort:
    """Create the metadata store configured in settings.

    Args:
        settings: Application settings

    Returns:
        Metadata store instance

    Raises:
        RepositoryError: On connection or schema errors
    """
    logger.info("metadata_store_sqlite_selected", path=settings.db_path)
    return cast(MetadataStorePort, SQLiteMetadataStore(db_path=settings.db_path))
