"""JSON Schemas for payload fields stored on build metadata."""

from typing import Any, Final

ID_TOKENS_SCHEMA: Final[dict[str, Any]] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "description": "ID tokens requested by a CI job",
    "type": "object",
    "patternProperties": {
        "^[A-Za-z_][A-Za-z0-9_]*$": {
            "type": "object",
            "required": ["aud"],
            "properties": {
                "aud": {
                    "oneOf": [
                        {"type": "string", "minLength": 1},
                        {
                            "type": "array",
                            "minItems": 1,
                            "uniqueItems": True,
                            "items": {"type": "string", "minLength": 1},
                        },
                    ]
                }
            },
            "additionalProperties": False,
        }
    },
    "additionalProperties": False,
}

SECRET_PROVIDERS: Final[tuple[str, ...]] = (
    "vault",
    "azure_key_vault",
    "gcp_secret_manager",
    "aws_secrets_manager",
)

SECRETS_SCHEMA: Final[dict[str, Any]] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "description": "External secrets requested by a CI job",
    "type": "object",
    "patternProperties": {
        "^[A-Za-z_][A-Za-z0-9_]*$": {
            "type": "object",
            "properties": {
                **{provider: {"type": "object"} for provider in SECRET_PROVIDERS},
                "file": {"type": "boolean"},
                "token": {"type": "string"},
            },
            "anyOf": [{"required": [provider]} for provider in SECRET_PROVIDERS],
            "additionalProperties": False,
        }
    },
    "additionalProperties": False,
}
