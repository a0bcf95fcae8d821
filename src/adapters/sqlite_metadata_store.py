"""SQLite adapter for build metadata.

Implements MetadataStorePort with a local SQLite database.
"""

import json
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Final

from src.config.logging_config import get_logger
from src.domain.exceptions import MetadataNotFoundError, RepositoryError
from src.domain.models import (
    BuildMetadata,
    ConfigVariable,
    MetadataKey,
    ResolvedTimeout,
    TimeoutInputs,
    TimeoutSource,
)
from src.services.payload_validator import PayloadValidator
from src.services.timeout_resolver import inputs_from_sources

logger = get_logger(__name__)

METADATA_TABLE: Final[str] = "ci_builds_metadata"
TIMEOUT_SOURCES_TABLE: Final[str] = "build_timeout_sources"

_SELECT_COLUMNS: Final[str] = """
    id, partition_id, build_id, project_id, timeout, timeout_source,
    config_options, config_variables, runtime_runner_features,
    id_tokens, secrets, interruptible, has_exposed_artifacts,
    debug_trace_enabled
"""


def _optional_bool(value: int | None) -> bool | None:
    if value is None:
        return None
    return bool(value)


def _bool_column(value: bool | None) -> int | None:
    if value is None:
        return None
    return 1 if value else 0


class SQLiteMetadataStore:
    """SQLite-backed build metadata store."""

    def __init__(
        self, db_path: str, *, validator: PayloadValidator | None = None
    ) -> None:
        """Initialize store and ensure schema.

        Args:
            db_path: Path to SQLite database file
            validator: Payload validator applied on create and save
        """
        self.db_path = db_path
        self._validator = validator or PayloadValidator()

        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        self._create_schema()

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        """Yield a connection that commits on success and always closes."""
        try:
            conn = sqlite3.connect(self.db_path)
        except sqlite3.Error as e:
            raise RepositoryError(f"Cannot open SQLite database: {e}") from e
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RepositoryError(f"SQLite operation failed: {e}") from e
        finally:
            conn.close()

    def _create_schema(self) -> None:
        logger.info("sqlite_schema_creation_started", db_path=str(self.db_path))
        with self._connection() as conn:
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {METADATA_TABLE} (
                    id INTEGER NOT NULL,
                    partition_id INTEGER NOT NULL,
                    build_id INTEGER NOT NULL,
                    project_id INTEGER,
                    timeout INTEGER,
                    timeout_source INTEGER NOT NULL DEFAULT 1,
                    config_options TEXT NOT NULL DEFAULT '{{}}',
                    config_variables TEXT NOT NULL DEFAULT '[]',
                    runtime_runner_features TEXT NOT NULL DEFAULT '{{}}',
                    id_tokens TEXT NOT NULL DEFAULT '{{}}',
                    secrets TEXT NOT NULL DEFAULT '{{}}',
                    interruptible INTEGER,
                    has_exposed_artifacts INTEGER,
                    debug_trace_enabled INTEGER NOT NULL DEFAULT 0,
                    PRIMARY KEY (id, partition_id)
                )
                """
            )
            conn.execute(
                f"""
                CREATE INDEX IF NOT EXISTS idx_{METADATA_TABLE}_build
                ON {METADATA_TABLE}(build_id, partition_id)
                """
            )
            conn.execute(
                f"""
                CREATE TABLE IF NOT EXISTS {TIMEOUT_SOURCES_TABLE} (
                    build_id INTEGER PRIMARY KEY,
                    build_options TEXT,
                    project_build_timeout INTEGER,
                    runner_maximum_timeout INTEGER
                )
                """
            )
        logger.info("sqlite_schema_creation_completed", db_path=str(self.db_path))

    def _row_to_metadata(self, row: sqlite3.Row) -> BuildMetadata:
        return BuildMetadata(
            id=row["id"],
            partition_id=row["partition_id"],
            build_id=row["build_id"],
            project_id=row["project_id"],
            timeout=row["timeout"],
            timeout_source=TimeoutSource.from_code(row["timeout_source"]),
            config_options=json.loads(row["config_options"]),
            config_variables=[
                ConfigVariable(**item) for item in json.loads(row["config_variables"])
            ],
            runtime_runner_features=json.loads(row["runtime_runner_features"]),
            id_tokens=json.loads(row["id_tokens"]),
            secrets=json.loads(row["secrets"]),
            interruptible=_optional_bool(row["interruptible"]),
            has_exposed_artifacts=_optional_bool(row["has_exposed_artifacts"]),
            debug_trace_enabled=bool(row["debug_trace_enabled"]),
        )

    def _mutable_columns(self, metadata: BuildMetadata) -> dict[str, Any]:
        return {
            "build_id": metadata.build_id,
            "project_id": metadata.project_id,
            "timeout": metadata.timeout,
            "timeout_source": metadata.timeout_source.code,
            "config_options": json.dumps(metadata.config_options),
            "config_variables": json.dumps(
                [variable.model_dump() for variable in metadata.config_variables]
            ),
            "runtime_runner_features": json.dumps(metadata.runtime_runner_features),
            "id_tokens": json.dumps(metadata.id_tokens),
            "secrets": json.dumps(metadata.secrets),
            "interruptible": _bool_column(metadata.interruptible),
            "has_exposed_artifacts": _bool_column(metadata.has_exposed_artifacts),
            "debug_trace_enabled": 1 if metadata.debug_trace_enabled else 0,
        }

    def create(
        self, metadata: BuildMetadata, *, build_project_id: int | None = None
    ) -> BuildMetadata:
        """Insert a new record, assigning the next free ID when unset.

        Raises:
            PayloadValidationError: If id_tokens or secrets are malformed
            RepositoryError: On storage errors (including duplicate keys)
        """
        self._validator.validate(metadata)

        stored = metadata.model_copy(
            update={"project_id": metadata.project_id or build_project_id}
        )

        with self._connection() as conn:
            if stored.id is None:
                row = conn.execute(
                    f"SELECT COALESCE(MAX(id), 0) + 1 AS next_id FROM {METADATA_TABLE}"
                ).fetchone()
                stored = stored.model_copy(update={"id": row["next_id"]})

            columns = {"id": stored.id, "partition_id": stored.partition_id}
            columns.update(self._mutable_columns(stored))
            placeholders = ", ".join("?" for _ in columns)
            conn.execute(
                f"INSERT INTO {METADATA_TABLE} ({', '.join(columns)}) "
                f"VALUES ({placeholders})",
                tuple(columns.values()),
            )

        logger.debug(
            "build_metadata_created",
            metadata_id=stored.id,
            partition_id=stored.partition_id,
            build_id=stored.build_id,
        )
        return stored

    def get(self, key: MetadataKey) -> BuildMetadata:
        """Load one record.

        Raises:
            MetadataNotFoundError: If no record matches the key
            RepositoryError: On storage errors
        """
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM {METADATA_TABLE} "
                "WHERE id = ? AND partition_id = ?",
                (key.id, key.partition_id),
            ).fetchone()

        if row is None:
            raise MetadataNotFoundError(key.id, key.partition_id)
        return self._row_to_metadata(row)

    def save(self, metadata: BuildMetadata) -> None:
        self._validator.validate(metadata)
        key = metadata.key
        columns = self._mutable_columns(metadata)
        assignments = ", ".join(f"{column} = ?" for column in columns)

        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE {METADATA_TABLE} SET {assignments} "
                "WHERE id = ? AND partition_id = ?",
                (*columns.values(), key.id, key.partition_id),
            )
            updated = cursor.rowcount

        if updated == 0:
            raise MetadataNotFoundError(key.id, key.partition_id)

    def update_timeout(self, key: MetadataKey, timeout: ResolvedTimeout) -> None:
        with self._connection() as conn:
            cursor = conn.execute(
                f"UPDATE {METADATA_TABLE} SET timeout = ?, timeout_source = ? "
                "WHERE id = ? AND partition_id = ?",
                (timeout.value, timeout.source.code, key.id, key.partition_id),
            )
            updated = cursor.rowcount

        if updated == 0:
            raise MetadataNotFoundError(key.id, key.partition_id)

    def record_timeout_sources(
        self,
        build_id: int,
        *,
        build_options: dict[str, Any] | None = None,
        project_build_timeout: int | None = None,
        runner_maximum_timeout: int | None = None,
    ) -> None:
        """Store the values the build's job, project and runner offer."""
        with self._connection() as conn:
            conn.execute(
                f"""
                INSERT OR REPLACE INTO {TIMEOUT_SOURCES_TABLE} (
                    build_id, build_options, project_build_timeout,
                    runner_maximum_timeout
                ) VALUES (?, ?, ?, ?)
                """,
                (
                    build_id,
                    json.dumps(build_options) if build_options is not None else None,
                    project_build_timeout,
                    runner_maximum_timeout,
                ),
            )

    def timeout_inputs(self, build_id: int) -> TimeoutInputs:
        """Read timeout inputs for a build; a build with none yields empty inputs."""
        with self._connection() as conn:
            row = conn.execute(
                f"SELECT build_options, project_build_timeout, runner_maximum_timeout "
                f"FROM {TIMEOUT_SOURCES_TABLE} WHERE build_id = ?",
                (build_id,),
            ).fetchone()

        if row is None:
            return TimeoutInputs()

        build_options = (
            json.loads(row["build_options"]) if row["build_options"] else None
        )
        return inputs_from_sources(
            build_options,
            row["project_build_timeout"],
            row["runner_maximum_timeout"],
        )

    def _list_where(self, condition: str) -> list[BuildMetadata]:
        with self._connection() as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM {METADATA_TABLE} "
                f"WHERE {condition} ORDER BY partition_id, id"
            ).fetchall()
        return [self._row_to_metadata(row) for row in rows]

    def list_interruptible(self) -> list[BuildMetadata]:
        return self._list_where("interruptible = 1")

    def list_with_exposed_artifacts(self) -> list[BuildMetadata]:
        return self._list_where("has_exposed_artifacts = 1")
