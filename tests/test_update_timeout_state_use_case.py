"""Tests for update_timeout_state_use_case."""

from unittest.mock import Mock

import pytest
from structlog.testing import capture_logs

from src.adapters.sqlite_metadata_store import SQLiteMetadataStore
from src.domain.exceptions import MetadataNotFoundError
from src.domain.models import (
    BuildMetadata,
    MetadataKey,
    ResolvedTimeout,
    TimeoutInputs,
    TimeoutSource,
)
from src.use_cases.update_timeout_state import update_timeout_state_use_case


@pytest.fixture
def stored(store: SQLiteMetadataStore, sample_metadata: BuildMetadata) -> BuildMetadata:
    return store.create(sample_metadata)


def test_runner_maximum_caps_job_timeout(
    store: SQLiteMetadataStore, stored: BuildMetadata
) -> None:
    store.record_timeout_sources(
        stored.build_id,
        build_options={"job_timeout": 7200},
        project_build_timeout=3600,
        runner_maximum_timeout=1800,
    )

    result = update_timeout_state_use_case(store, stored.key)

    assert result == ResolvedTimeout(value=1800, source=TimeoutSource.RUNNER)
    loaded = store.get(stored.key)
    assert loaded.timeout == 1800
    assert loaded.timeout_source is TimeoutSource.RUNNER


def test_project_default_used_without_job_timeout(
    store: SQLiteMetadataStore, stored: BuildMetadata
) -> None:
    store.record_timeout_sources(
        stored.build_id,
        build_options={"script": ["make"]},
        project_build_timeout=3600,
        runner_maximum_timeout=0,
    )

    result = update_timeout_state_use_case(store, stored.key)

    assert result == ResolvedTimeout(value=3600, source=TimeoutSource.PROJECT)
    assert store.get(stored.key).timeout_source is TimeoutSource.PROJECT


def test_no_timeout_source_leaves_record_untouched(
    store: SQLiteMetadataStore, stored: BuildMetadata
) -> None:
    store.update_timeout(stored.key, ResolvedTimeout(value=900, source=TimeoutSource.JOB))

    with capture_logs() as logs:
        result = update_timeout_state_use_case(store, stored.key)

    assert result is None
    loaded = store.get(stored.key)
    assert loaded.timeout == 900
    assert loaded.timeout_source is TimeoutSource.JOB
    assert [entry["event"] for entry in logs] == ["timeout_state_unchanged"]


def test_update_is_logged_with_previous_state(
    store: SQLiteMetadataStore, stored: BuildMetadata
) -> None:
    store.record_timeout_sources(stored.build_id, build_options={"job_timeout": 600})

    with capture_logs() as logs:
        update_timeout_state_use_case(store, stored.key, correlation_id="corr-1")

    updated = [entry for entry in logs if entry["event"] == "timeout_state_updated"]
    assert len(updated) == 1
    assert updated[0]["timeout"] == 600
    assert updated[0]["timeout_source"] == "job"
    assert updated[0]["previous_source"] == "unknown"


def test_missing_record_raises(store: SQLiteMetadataStore) -> None:
    with pytest.raises(MetadataNotFoundError):
        update_timeout_state_use_case(store, MetadataKey(id=99, partition_id=100))


def test_use_case_only_writes_through_port() -> None:
    store = Mock()
    store.get.return_value = BuildMetadata(id=1, partition_id=100, build_id=5)
    store.timeout_inputs.return_value = TimeoutInputs(
        job_timeout=300, project_timeout=60, runner_maximum_timeout=300
    )
    key = MetadataKey(id=1, partition_id=100)

    result = update_timeout_state_use_case(store, key)

    assert result == ResolvedTimeout(value=300, source=TimeoutSource.JOB)
    store.timeout_inputs.assert_called_once_with(5)
    store.update_timeout.assert_called_once_with(key, result)
    store.save.assert_not_called()
