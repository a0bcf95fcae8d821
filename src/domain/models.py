"""Domain models for build metadata and timeout resolution.

All models use Pydantic v2 for validation and serialization.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TimeoutSource(str, Enum):
    """Origin of the timeout enforced for a job."""

    UNKNOWN = "unknown"
    PROJECT = "project"
    RUNNER = "runner"
    JOB = "job"

    @property
    def code(self) -> int:
        """Stable integer code used in the metadata table."""
        return _TIMEOUT_SOURCE_CODES[self]

    @classmethod
    def from_code(cls, code: int | None) -> "TimeoutSource":
        """Map a stored integer code back to a source (``None`` -> UNKNOWN)."""
        if code is None:
            return cls.UNKNOWN
        for source, source_code in _TIMEOUT_SOURCE_CODES.items():
            if source_code == code:
                return source
        raise ValueError(f"Unknown timeout source code: {code}")


_TIMEOUT_SOURCE_CODES: dict[TimeoutSource, int] = {
    TimeoutSource.UNKNOWN: 1,
    TimeoutSource.PROJECT: 2,
    TimeoutSource.RUNNER: 3,
    TimeoutSource.JOB: 4,
}


class TimeoutCandidate(BaseModel):
    """A timeout value offered by one source."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., gt=0, description="Timeout in seconds")
    source: TimeoutSource = Field(..., description="Source offering the value")

    @field_validator("source")
    @classmethod
    def validate_source(cls, v: TimeoutSource) -> TimeoutSource:
        """A present candidate always has a determinate source."""
        if v is TimeoutSource.UNKNOWN:
            raise ValueError("candidate source must not be unknown")
        return v


class ResolvedTimeout(BaseModel):
    """Effective timeout for a job plus the source that determined it."""

    model_config = ConfigDict(frozen=True)

    value: int = Field(..., gt=0, description="Timeout in seconds")
    source: TimeoutSource = Field(..., description="Winning source")


class TimeoutInputs(BaseModel):
    """Raw timeout values read from the job, its project and its runner."""

    model_config = ConfigDict(frozen=True)

    job_timeout: int | None = Field(
        default=None, description="Job-level timeout from the build options"
    )
    project_timeout: int | None = Field(
        default=None, description="Project default build timeout"
    )
    runner_maximum_timeout: int | None = Field(
        default=None, description="Maximum timeout allowed by the runner"
    )


class MetadataKey(BaseModel):
    """Composite identity of a metadata record."""

    model_config = ConfigDict(frozen=True)

    id: int
    partition_id: int


class ConfigVariable(BaseModel):
    """A CI variable declared in the job configuration."""

    key: str
    value: str | None = None


class BuildMetadata(BaseModel):
    """Disposable per-build data stored next to a CI job."""

    # Identity
    id: int | None = Field(default=None, description="Record ID (assigned on create)")
    partition_id: int = Field(default=100, description="Table partition")
    build_id: int = Field(..., description="Owning build ID")
    project_id: int | None = Field(default=None, description="Owning project ID")

    # Timeout state
    timeout: int | None = Field(default=None, description="Effective timeout (s)")
    timeout_source: TimeoutSource = Field(default=TimeoutSource.UNKNOWN)

    # Job configuration
    config_options: dict[str, Any] = Field(default_factory=dict)
    config_variables: list[ConfigVariable] = Field(default_factory=list)
    runtime_runner_features: dict[str, Any] = Field(default_factory=dict)

    # Payloads validated against JSON Schemas
    id_tokens: dict[str, Any] = Field(default_factory=dict)
    secrets: dict[str, Any] = Field(default_factory=dict)

    # Flags
    interruptible: bool | None = None
    has_exposed_artifacts: bool | None = None
    debug_trace_enabled: bool = False

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v: int | None) -> int | None:
        if v is not None and v <= 0:
            raise ValueError("timeout must be positive")
        return v

    @property
    def key(self) -> MetadataKey:
        if self.id is None:
            raise ValueError("metadata has not been persisted yet")
        return MetadataKey(id=self.id, partition_id=self.partition_id)
