"""Tests for runner feature flags and debug tracing."""

from unittest.mock import Mock

from src.adapters.sqlite_metadata_store import SQLiteMetadataStore
from src.domain.models import BuildMetadata, MetadataKey
from src.use_cases.runner_features import (
    cancel_gracefully,
    enable_debug_trace,
    set_cancel_gracefully,
)


def test_cancel_gracefully_requires_literal_true() -> None:
    assert cancel_gracefully(BuildMetadata(build_id=1)) is False
    assert (
        cancel_gracefully(
            BuildMetadata(build_id=1, runtime_runner_features={"cancel_gracefully": "yes"})
        )
        is False
    )
    assert (
        cancel_gracefully(
            BuildMetadata(build_id=1, runtime_runner_features={"cancel_gracefully": True})
        )
        is True
    )


def test_set_cancel_gracefully_persists_and_keeps_other_features(
    store: SQLiteMetadataStore,
) -> None:
    created = store.create(
        BuildMetadata(build_id=1, runtime_runner_features={"trace_sections": True})
    )

    updated = set_cancel_gracefully(store, created.key)

    assert cancel_gracefully(updated)
    loaded = store.get(created.key)
    assert loaded.runtime_runner_features == {
        "trace_sections": True,
        "cancel_gracefully": True,
    }


def test_enable_debug_trace_persists_flag(store: SQLiteMetadataStore) -> None:
    created = store.create(BuildMetadata(build_id=1))

    assert enable_debug_trace(store, created.key) is True
    assert store.get(created.key).debug_trace_enabled is True


def test_enable_debug_trace_skips_save_when_already_enabled() -> None:
    store = Mock()
    store.get.return_value = BuildMetadata(
        id=1, partition_id=100, build_id=1, debug_trace_enabled=True
    )

    assert enable_debug_trace(store, MetadataKey(id=1, partition_id=100)) is True
    store.save.assert_not_called()
