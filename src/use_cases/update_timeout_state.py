"""Update timeout state use case.

Resolves the effective timeout of a build and stores it on the build's
metadata record.
"""

from src.config.logging_config import get_logger
from src.domain.models import MetadataKey, ResolvedTimeout
from src.observability.tracing import correlation_scope
from src.ports.metadata_store import MetadataStorePort
from src.services import timeout_resolver

logger = get_logger(__name__)


def update_timeout_state_use_case(
    store: MetadataStorePort,
    key: MetadataKey,
    *,
    correlation_id: str | None = None,
) -> ResolvedTimeout | None:
    """Resolve and persist the timeout for one metadata record.

    1. Load the record and the timeout inputs of its build
    2. Resolve: job timeout replaces the project default, the runner
       maximum caps the result, the shortest candidate wins
    3. Write timeout and timeout source back when a result exists;
       otherwise leave the record untouched

    Args:
        store: Metadata store implementation
        key: Record identity
        correlation_id: Optional correlation ID to bind to log entries

    Returns:
        The persisted timeout, or None when the build has no timeout source

    Raises:
        MetadataNotFoundError: If the record does not exist
        RepositoryError: On storage errors

    Example:
        >>> result = update_timeout_state_use_case(store, MetadataKey(id=1, partition_id=100))
        >>> result.source
        <TimeoutSource.RUNNER: 'runner'>
    """
    metadata = store.get(key)

    with correlation_scope(correlation_id, build_id=metadata.build_id):
        inputs = store.timeout_inputs(metadata.build_id)
        resolved = timeout_resolver.resolve_inputs(inputs)

        if resolved is None:
            logger.info(
                "timeout_state_unchanged",
                metadata_id=key.id,
                partition_id=key.partition_id,
                reason="no_timeout_source",
            )
            return None

        store.update_timeout(key, resolved)
        logger.info(
            "timeout_state_updated",
            metadata_id=key.id,
            partition_id=key.partition_id,
            timeout=resolved.value,
            timeout_source=resolved.source.value,
            previous_timeout=metadata.timeout,
            previous_source=metadata.timeout_source.value,
        )
        return resolved
