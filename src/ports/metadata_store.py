"""Port definition for build metadata persistence."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from src.domain.models import (
    BuildMetadata,
    MetadataKey,
    ResolvedTimeout,
    TimeoutInputs,
)


@runtime_checkable
class MetadataStorePort(Protocol):
    """Interface for reading and writing build metadata records."""

    def create(
        self, metadata: BuildMetadata, *, build_project_id: int | None = None
    ) -> BuildMetadata:
        """Insert a new record.

        Args:
            metadata: Record to insert (``id`` may be unset).
            build_project_id: Project of the owning build, used when the
                record carries no ``project_id``.

        Returns:
            The stored record with its assigned ``id``.
        """

    def get(self, key: MetadataKey) -> BuildMetadata:
        """Load a record or raise ``MetadataNotFoundError``."""

    def save(self, metadata: BuildMetadata) -> None:
        """Overwrite all mutable fields of an existing record."""

    def update_timeout(self, key: MetadataKey, timeout: ResolvedTimeout) -> None:
        """Persist the effective timeout and its source."""

    def record_timeout_sources(
        self,
        build_id: int,
        *,
        build_options: dict[str, Any] | None = None,
        project_build_timeout: int | None = None,
        runner_maximum_timeout: int | None = None,
    ) -> None:
        """Store what the build's job options, project and runner offer."""

    def timeout_inputs(self, build_id: int) -> TimeoutInputs:
        """Read the timeout values offered by a build's job, project and runner."""

    def list_interruptible(self) -> list[BuildMetadata]: ...

    def list_with_exposed_artifacts(self) -> list[BuildMetadata]: ...


__all__ = ["MetadataStorePort"]
