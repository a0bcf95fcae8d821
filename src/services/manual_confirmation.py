"""Rendering of manual job confirmation prompts.

Variable references in the prompt are annotated with their values so the
person confirming the job sees what will be used.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any, Final

from src.domain.models import BuildMetadata, ConfigVariable

MANUAL_CONFIRMATION_OPTION: Final[str] = "manual_confirmation"

VARIABLE_REFERENCE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$[A-Za-z]\w*")
"""Pattern to match '$NAME' references in the confirmation text."""


def variables_to_dict(variables: Iterable[ConfigVariable]) -> dict[str, str | None]:
    """Later declarations of the same key win."""
    return {variable.key: variable.value for variable in variables}


def manual_confirmation_message(
    config_options: Mapping[str, Any] | None,
    config_variables: Iterable[ConfigVariable],
) -> str | None:
    """Build the confirmation message shown before a manual job runs.

    Args:
        config_options: Job configuration options
        config_variables: Variables declared for the job

    Returns:
        Message with known references expanded, or None when the job has
        no confirmation prompt

    Example:
        >>> manual_confirmation_message(
        ...     {"manual_confirmation": "Deploy to $ENV?"},
        ...     [ConfigVariable(key="ENV", value="production")],
        ... )
        'Deploy to $ENV=production?'
    """
    if not config_options or not config_options.get(MANUAL_CONFIRMATION_OPTION):
        return None

    message = str(config_options[MANUAL_CONFIRMATION_OPTION])
    variables = variables_to_dict(config_variables)

    def _expand(match: re.Match[str]) -> str:
        name = match.group(0).removeprefix("$")
        value = variables.get(name)
        if value is None:
            return match.group(0)
        return f"${name}={value}"

    return VARIABLE_REFERENCE_PATTERN.sub(_expand, message)


def metadata_manual_confirmation(metadata: BuildMetadata) -> str | None:
    return manual_confirmation_message(
        metadata.config_options, metadata.config_variables
    )
