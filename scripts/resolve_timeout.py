"""Resolve the effective timeout for a CI job.

Without --update the timeout is resolved from the values given on the command
line. With --update the stored metadata record is resolved from its build's
recorded timeout sources and the result is persisted.

Examples:
    python scripts/resolve_timeout.py --job 1h --runner 30m
    python scripts/resolve_timeout.py --update 42 --partition 100
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from src.adapters.store_factory import create_metadata_store
from src.config.logging_config import get_logger, setup_logging
from src.config.settings import get_settings
from src.domain.exceptions import BuildMetadataError
from src.domain.models import MetadataKey, ResolvedTimeout
from src.services import timeout_resolver
from src.services.duration_format import format_duration, parse_duration
from src.use_cases.update_timeout_state import update_timeout_state_use_case

logger = get_logger(__name__)


def _duration(text: str) -> int:
    try:
        return parse_duration(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Resolve the timeout of a CI job")
    parser.add_argument(
        "--job",
        type=_duration,
        default=None,
        help="Job-level timeout (e.g. 600, 10m, 1h 30m)",
    )
    parser.add_argument(
        "--project",
        type=_duration,
        default=None,
        help="Project default timeout (default: from config)",
    )
    parser.add_argument(
        "--runner",
        type=_duration,
        default=None,
        help="Runner maximum timeout; 0 means not set",
    )
    parser.add_argument(
        "--update",
        type=int,
        default=None,
        metavar="METADATA_ID",
        help="Resolve and persist the timeout of a stored metadata record",
    )
    parser.add_argument(
        "--partition",
        type=int,
        default=100,
        help="Partition of the metadata record (with --update)",
    )
    parser.add_argument(
        "--json-logs",
        action="store_true",
        help="Emit logs in JSON format",
    )
    return parser.parse_args(argv)


def format_result(resolved: ResolvedTimeout | None) -> str:
    """Render a result as '<seconds> <source> (<human readable>)' or 'none'."""
    if resolved is None:
        return "none"
    return (
        f"{resolved.value} {resolved.source.value} "
        f"({format_duration(resolved.value)})"
    )


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)

    settings = get_settings()
    setup_logging(
        log_level=settings.log_level, json_logs=args.json_logs or settings.json_logs
    )

    if args.update is not None:
        store = create_metadata_store(settings)
        key = MetadataKey(id=args.update, partition_id=args.partition)
        try:
            resolved = update_timeout_state_use_case(store, key)
        except BuildMetadataError as e:
            logger.error(
                "timeout_update_failed",
                metadata_id=key.id,
                partition_id=key.partition_id,
                error=str(e),
            )
            return 1
    else:
        project_timeout = args.project
        if project_timeout is None:
            project_timeout = settings.default_project_timeout_seconds
        resolved = timeout_resolver.resolve(
            job_timeout=args.job,
            project_timeout=project_timeout,
            runner_maximum_timeout=args.runner,
        )

    print(format_result(resolved))
    return 0


if __name__ == "__main__":
    sys.exit(main())
