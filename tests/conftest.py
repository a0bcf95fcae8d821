"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.adapters.sqlite_metadata_store import SQLiteMetadataStore
from src.config.settings import Settings
from src.domain.models import BuildMetadata, ConfigVariable


@pytest.fixture
def db_path(tmp_path: Path) -> str:
    return str(tmp_path / "db" / "test.sqlite")


@pytest.fixture
def settings(db_path: str) -> Settings:
    """Settings pointing at a temporary SQLite database."""
    return Settings(db_path=db_path)


@pytest.fixture
def store(db_path: str) -> SQLiteMetadataStore:
    """Provide a metadata store backed by a temporary database."""
    return SQLiteMetadataStore(db_path=db_path)


@pytest.fixture
def sample_metadata() -> BuildMetadata:
    """Sample metadata for a deploy job."""
    return BuildMetadata(
        partition_id=100,
        build_id=501,
        project_id=7,
        config_options={
            "script": ["./deploy.sh"],
            "manual_confirmation": "Deploy $APP to $ENVIRONMENT?",
        },
        config_variables=[
            ConfigVariable(key="APP", value="billing"),
            ConfigVariable(key="ENVIRONMENT", value="production"),
        ],
        id_tokens={"VAULT_ID_TOKEN": {"aud": "https://vault.example.com"}},
        secrets={
            "DATABASE_PASSWORD": {
                "vault": {"engine": {"name": "kv-v2", "path": "ops"}},
                "token": "$VAULT_ID_TOKEN",
            }
        },
        interruptible=True,
    )
