from __future__ import annotations

from types import SimpleNamespace

import pytest

from src.domain.exceptions import MetadataNotFoundError
from src.domain.models import MetadataKey, ResolvedTimeout, TimeoutSource


def _settings(default_project_timeout_seconds: int | None = None) -> SimpleNamespace:
    return SimpleNamespace(
        log_level="INFO",
        json_logs=False,
        db_path="unused.sqlite",
        default_project_timeout_seconds=default_project_timeout_seconds,
    )


@pytest.fixture
def module(mocker):
    module = __import__("scripts.resolve_timeout", fromlist=["main"])
    mocker.patch.object(module, "setup_logging")
    return module


def test_resolves_from_command_line_values(module, mocker, capsys) -> None:
    mocker.patch.object(module, "get_settings", return_value=_settings())

    exit_code = module.main(["--job", "2h", "--runner", "30m"])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == "1800 runner (30m)"


def test_project_timeout_falls_back_to_config(module, mocker, capsys) -> None:
    mocker.patch.object(
        module,
        "get_settings",
        return_value=_settings(default_project_timeout_seconds=3600),
    )

    module.main(["--runner", "0"])

    assert capsys.readouterr().out.strip() == "3600 project (1h)"


def test_prints_none_without_candidates(module, mocker, capsys) -> None:
    mocker.patch.object(module, "get_settings", return_value=_settings())

    assert module.main([]) == 0
    assert capsys.readouterr().out.strip() == "none"


def test_update_resolves_stored_record(module, mocker, capsys) -> None:
    mocker.patch.object(module, "get_settings", return_value=_settings())
    store = mocker.Mock()
    mocker.patch.object(module, "create_metadata_store", return_value=store)
    use_case = mocker.patch.object(
        module,
        "update_timeout_state_use_case",
        return_value=ResolvedTimeout(value=600, source=TimeoutSource.JOB),
    )

    exit_code = module.main(["--update", "42", "--partition", "101"])

    assert exit_code == 0
    use_case.assert_called_once_with(store, MetadataKey(id=42, partition_id=101))
    assert capsys.readouterr().out.strip() == "600 job (10m)"


def test_update_of_missing_record_fails(module, mocker) -> None:
    mocker.patch.object(module, "get_settings", return_value=_settings())
    mocker.patch.object(module, "create_metadata_store", return_value=mocker.Mock())
    mocker.patch.object(
        module,
        "update_timeout_state_use_case",
        side_effect=MetadataNotFoundError(42, 100),
    )

    assert module.main(["--update", "42"]) == 1


def test_malformed_duration_is_rejected(module) -> None:
    with pytest.raises(SystemExit):
        module.parse_args(["--job", "soon"])
