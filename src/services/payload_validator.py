"""Payload validation for build metadata.

Validates the JSON payload fields of a record before it is stored.
"""

from typing import Any

from jsonschema import Draft7Validator

from src.domain.exceptions import PayloadValidationError
from src.domain.models import BuildMetadata
from src.domain.payload_schemas import ID_TOKENS_SCHEMA, SECRETS_SCHEMA


class PayloadValidator:
    """Validates metadata payload fields against their JSON Schemas."""

    def __init__(
        self,
        id_tokens_schema: dict[str, Any] = ID_TOKENS_SCHEMA,
        secrets_schema: dict[str, Any] = SECRETS_SCHEMA,
    ) -> None:
        self._validators: dict[str, Draft7Validator] = {
            "id_tokens": Draft7Validator(id_tokens_schema),
            "secrets": Draft7Validator(secrets_schema),
        }

    def errors_for(self, field_name: str, payload: dict[str, Any]) -> list[str]:
        """Return schema violations for one field (empty if valid)."""
        validator = self._validators[field_name]
        return [
            error.message
            for error in sorted(
                validator.iter_errors(payload),
                key=lambda e: [str(part) for part in e.path],
            )
        ]

    def validate(self, metadata: BuildMetadata) -> None:
        """Check a record before it is persisted.

        Raises:
            PayloadValidationError: On the first field violating its schema
        """
        for field_name in self._validators:
            errors = self.errors_for(field_name, getattr(metadata, field_name))
            if errors:
                raise PayloadValidationError(field_name, "; ".join(errors))
