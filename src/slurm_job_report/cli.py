from __future__ import annotations

import argparse
import logging
import os
import re
import shlex
import sys
from pathlib import Path
from typing import Sequence

from .jobids import extract_job_ids, split_job_ids
from .output import OutputError, check_format, render
from .reconcile import reconcile
from .report import build_report_table
from .sacct import build_sacct_command, query_jobs

LOGGER = logging.getLogger(__name__)
SACCT_ENV_VAR = "SLURM_JOB_REPORT_SACCT"

_JOB_ID_PATTERN = re.compile(r"^\d+")


class CliError(RuntimeError):
    """Raised when CLI validation fails."""


def parse_arguments(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description=(
            "Report state and resource usage of Slurm jobs. Pass job ids "
            "(separately or comma-separated) or a single workflow log file "
            "to scan for submitted job ids."
        ),
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        metavar="JOBID|LOGFILE",
        help="Job ids, a comma-separated list of job ids, or a Snakemake/Nextflow log file.",
    )
    formats = parser.add_mutually_exclusive_group()
    formats.add_argument(
        "--tsv",
        dest="format",
        action="store_const",
        const="tsv",
        help="Write tab-separated values.",
    )
    formats.add_argument(
        "--json",
        dest="format",
        action="store_const",
        const="json",
        help="Write a JSON list of job records.",
    )
    formats.add_argument(
        "--yaml",
        dest="format",
        action="store_const",
        const="yaml",
        help="Write a YAML document (requires PyYAML).",
    )
    parser.set_defaults(format="table")
    parser.add_argument(
        "--sacct",
        default=os.environ.get(SACCT_ENV_VAR, "sacct"),
        help=f"sacct executable to run (default: ${SACCT_ENV_VAR} or 'sacct').",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print the sacct commands and exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    return parser.parse_args(argv)


def _warn_unusual_job_ids(job_ids: Sequence[str]) -> None:
    for job_id in job_ids:
        if not _JOB_ID_PATTERN.match(job_id):
            LOGGER.warning("%s does not look like a Slurm job id or an existing log file", job_id)


def resolve_job_ids(inputs: Sequence[str]) -> list[str]:
    """Return the job ids to report on, scanning a log file when given one."""

    if not inputs:
        raise CliError("no job ids or log file given")

    if len(inputs) == 1 and Path(inputs[0]).is_file():
        LOGGER.debug("Reading job ids from log file %s", inputs[0])
        job_ids = extract_job_ids(inputs[0])
        source = inputs[0]
    else:
        LOGGER.debug("Reading job ids from the command line")
        job_ids = split_job_ids(inputs)
        source = "the command line"
        _warn_unusual_job_ids(job_ids)

    if not job_ids:
        raise CliError(f"no job ids found in {source}")

    LOGGER.debug("Resolved %d job ids from %s", len(job_ids), source)
    return job_ids


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_arguments(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    try:
        check_format(args.format)
        job_ids = resolve_job_ids(args.inputs)
    except (CliError, OutputError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.dry_run:
        for job_id in job_ids:
            print(shlex.join(build_sacct_command(job_id, sacct=args.sacct)))
        return 0

    rows = query_jobs(job_ids, sacct=args.sacct)
    if not rows:
        LOGGER.warning("None of the %d job ids could be queried.", len(job_ids))
        return 0

    records = reconcile(rows)
    print(render(build_report_table(records.values()), args.format))
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
