"""Runner feature flags and debug tracing on build metadata."""

from typing import Final

from src.config.logging_config import get_logger
from src.domain.models import BuildMetadata, MetadataKey
from src.ports.metadata_store import MetadataStorePort

CANCEL_GRACEFULLY_FEATURE: Final[str] = "cancel_gracefully"

logger = get_logger(__name__)


def cancel_gracefully(metadata: BuildMetadata) -> bool:
    """Whether the runner was asked to cancel the job gracefully."""
    return metadata.runtime_runner_features.get(CANCEL_GRACEFULLY_FEATURE) is True


def set_cancel_gracefully(store: MetadataStorePort, key: MetadataKey) -> BuildMetadata:
    """Flag the record so the runner cancels the job gracefully.

    Returns:
        The updated record
    """
    metadata = store.get(key)
    features = {**metadata.runtime_runner_features, CANCEL_GRACEFULLY_FEATURE: True}
    updated = metadata.model_copy(update={"runtime_runner_features": features})
    store.save(updated)

    logger.info(
        "cancel_gracefully_set",
        metadata_id=key.id,
        partition_id=key.partition_id,
        build_id=metadata.build_id,
    )
    return updated


def enable_debug_trace(store: MetadataStorePort, key: MetadataKey) -> bool:
    """Turn on debug tracing for the job; writes only when the flag changes.

    Returns:
        Always True
    """
    metadata = store.get(key)
    if metadata.debug_trace_enabled:
        logger.debug("debug_trace_already_enabled", metadata_id=key.id)
        return True

    store.save(metadata.model_copy(update={"debug_trace_enabled": True}))
    logger.info(
        "debug_trace_enabled",
        metadata_id=key.id,
        partition_id=key.partition_id,
        build_id=metadata.build_id,
    )
    return True
