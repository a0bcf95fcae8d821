"""Timeout precedence resolution for CI jobs.

A job can get its timeout from three places: its own configuration, the
project default and the runner maximum. The job value replaces the project
default, and the runner maximum caps whichever of those applies. The
shortest remaining candidate is enforced.

Example:
    >>> resolve(job_timeout=600, project_timeout=3600, runner_maximum_timeout=300)
    ResolvedTimeout(value=300, source=<TimeoutSource.RUNNER: 'runner'>)
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any, Final

from src.domain.models import (
    ResolvedTimeout,
    TimeoutCandidate,
    TimeoutInputs,
    TimeoutSource,
)

JOB_TIMEOUT_OPTION: Final[str] = "job_timeout"


def _positive(value: int | None) -> int | None:
    if value is None or value <= 0:
        return None
    return value


def job_candidate(job_timeout: int | None) -> TimeoutCandidate | None:
    """Candidate for a timeout configured on the job itself."""
    value = _positive(job_timeout)
    if value is None:
        return None
    return TimeoutCandidate(value=value, source=TimeoutSource.JOB)


def project_candidate(project_timeout: int | None) -> TimeoutCandidate | None:
    """Candidate for the project default; zero means the project has none."""
    value = _positive(project_timeout)
    if value is None:
        return None
    return TimeoutCandidate(value=value, source=TimeoutSource.PROJECT)


def runner_candidate(runner_maximum_timeout: int | None) -> TimeoutCandidate | None:
    """Candidate for the runner cap; only positive values count as set."""
    value = _positive(runner_maximum_timeout)
    if value is None:
        return None
    return TimeoutCandidate(value=value, source=TimeoutSource.RUNNER)


def select_timeout(
    candidates: Iterable[TimeoutCandidate | None],
) -> ResolvedTimeout | None:
    """Pick the shortest present candidate.

    Ties keep the earliest candidate in iteration order.

    Returns:
        Winning timeout, or None when no candidate is present
    """
    winner: TimeoutCandidate | None = None
    for candidate in candidates:
        if candidate is None:
            continue
        if winner is None or candidate.value < winner.value:
            winner = candidate

    if winner is None:
        return None
    return ResolvedTimeout(value=winner.value, source=winner.source)


def resolve(
    job_timeout: int | None = None,
    project_timeout: int | None = None,
    runner_maximum_timeout: int | None = None,
) -> ResolvedTimeout | None:
    """Resolve the effective timeout for a job.

    Args:
        job_timeout: Timeout from the job configuration, in seconds
        project_timeout: Project default build timeout, in seconds
        runner_maximum_timeout: Runner maximum timeout, in seconds

    Returns:
        Effective timeout and its source, or None when nothing is configured
    """
    job_or_project = job_candidate(job_timeout) or project_candidate(project_timeout)
    return select_timeout([job_or_project, runner_candidate(runner_maximum_timeout)])


def resolve_inputs(inputs: TimeoutInputs) -> ResolvedTimeout | None:
    return resolve(
        job_timeout=inputs.job_timeout,
        project_timeout=inputs.project_timeout,
        runner_maximum_timeout=inputs.runner_maximum_timeout,
    )


def inputs_from_sources(
    build_options: Mapping[str, Any] | None,
    project_build_timeout: int | None,
    runner_maximum_timeout: int | None,
) -> TimeoutInputs:
    """Collect timeout inputs from a build's options, project and runner."""
    job_timeout = None
    if build_options:
        job_timeout = build_options.get(JOB_TIMEOUT_OPTION)

    return TimeoutInputs(
        job_timeout=job_timeout,
        project_timeout=project_build_timeout,
        runner_maximum_timeout=runner_maximum_timeout,
    )


__all__ = [
    "JOB_TIMEOUT_OPTION",
    "inputs_from_sources",
    "job_candidate",
    "project_candidate",
    "resolve",
    "resolve_inputs",
    "runner_candidate",
    "select_timeout",
]
