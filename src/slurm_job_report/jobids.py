"""Discover job identifiers from command line arguments and workflow logs."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Iterable, Sequence

LOGGER = logging.getLogger(__name__)


# Each rule captures the job id as its first group. Every rule is tried on
# every line, so a line can contribute one id per rule.
JOB_ID_RULES: tuple[tuple[str, re.Pattern[str]], ...] = (
    # Snakemake: "Submitted job 3 with external jobid 'Submitted batch job 12345'."
    ("snakemake", re.compile(r"external jobid\D*?['\"](?:[^'\"]*?\s)?(\d+)['\"]")),
    # Nextflow and friends: "... (JOB ID: 12345)"
    ("job-id-annotation", re.compile(r"\(JOB ID:\s*(\d+)\)")),
)


def match_job_ids(line: str, rules: Sequence[tuple[str, re.Pattern[str]]] | None = None) -> list[str]:
    if rules is None:
        rules = JOB_ID_RULES
    found: list[str] = []
    for name, pattern in rules:
        match = pattern.search(line)
        if match:
            LOGGER.debug("Rule %s matched job id %s", name, match.group(1))
            found.append(match.group(1))
    return found


def _job_id_sort_key(job_id: str) -> tuple[bool, int, str]:
    # Plain numeric ids sort numerically, anything else after them as text.
    if job_id.isdigit():
        return False, int(job_id), job_id
    return True, 0, job_id


def extract_job_ids(path: str | Path) -> list[str]:
    """Return the sorted, de-duplicated job ids mentioned in a workflow log.

    A missing or unreadable file is logged and treated as containing no ids.
    """

    log_path = Path(path)
    job_ids: set[str] = set()
    try:
        with log_path.open(encoding="utf-8", errors="replace") as handle:
            for line in handle:
                job_ids.update(match_job_ids(line))
    except OSError as exc:
        LOGGER.error("Cannot read log file %s: %s", log_path, exc.strerror or exc)
        return []

    LOGGER.debug("Found %d job ids in %s", len(job_ids), log_path)
    return sorted(job_ids, key=_job_id_sort_key)


def split_job_ids(values: Iterable[str]) -> list[str]:
    """Split comma-separated job id arguments, keeping first-seen order."""

    job_ids: list[str] = []
    for value in values:
        for part in value.split(","):
            part = part.strip()
            if part and part not in job_ids:
                job_ids.append(part)
    return job_ids
