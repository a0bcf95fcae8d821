"""Exception hierarchy for build metadata handling.

Errors are split into retryable (storage hiccups) and non-retryable
(bad input, missing records).
"""


class BuildMetadataError(Exception):
    """Base exception for all application errors."""

    pass


class RetryableError(BuildMetadataError):
    """Errors that can be retried (locked database, transient I/O)."""

    pass


class NonRetryableError(BuildMetadataError):
    """Errors that should not be retried (validation, missing data)."""

    pass


class ValidationError(NonRetryableError):
    """Data validation errors."""

    pass


class PayloadValidationError(ValidationError):
    """A JSON payload field does not match its schema."""

    def __init__(self, field_name: str, message: str) -> None:
        self.field_name = field_name
        super().__init__(f"{field_name} is invalid: {message}")


class MetadataNotFoundError(NonRetryableError):
    """No build metadata record exists for the requested key."""

    def __init__(self, metadata_id: int, partition_id: int) -> None:
        self.metadata_id = metadata_id
        self.partition_id = partition_id
        super().__init__(
            f"Build metadata {metadata_id} not found in partition {partition_id}"
        )


class RepositoryError(RetryableError):
    """Database/storage errors."""

    pass
