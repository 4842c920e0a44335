from __future__ import annotations

import logging
import subprocess
from typing import Callable, Iterable, List, Sequence

from .models import RawAccountingRow

LOGGER = logging.getLogger(__name__)


SACCT_FIELDS = (
    "JobID",
    "JobName",
    "State",
    "Elapsed",
    "NNodes",
    "NCPUS",
    "TotalCPU",
    "ReqMem",
    "MaxRSS",
    "AveRSS",
    "MaxVMSize",
    "ExitCode",
    "Timelimit",
    "NodeList",
    "Start",
    "End",
    "Submit",
    "WorkDir",
)
SACCT_FORMAT = ",".join(SACCT_FIELDS)

Runner = Callable[[Sequence[str]], str]


class SacctError(RuntimeError):
    """Raised when sacct execution fails."""


def build_sacct_command(job_id: str, *, sacct: str = "sacct") -> List[str]:
    return [
        sacct,
        "--parsable2",
        f"--format={SACCT_FORMAT}",
        "-j",
        job_id,
    ]


def run_sacct(command: Sequence[str]) -> str:
    try:
        result = subprocess.run(
            list(command),
            check=True,
            capture_output=True,
            text=True,
        )
    except FileNotFoundError as exc:
        raise SacctError(f"{command[0]} command not found") from exc
    except subprocess.CalledProcessError as exc:
        raise SacctError(
            f"sacct returned non-zero exit code {exc.returncode}: {(exc.stderr or '').strip()}"
        ) from exc

    return result.stdout


def parse_sacct_output(output: str) -> List[RawAccountingRow]:
    """Zip ``--parsable2`` output with its header line.

    Blank lines are ignored. Lines whose field count does not match the
    header are logged and dropped.
    """

    rows: List[RawAccountingRow] = []
    header: List[str] | None = None

    for raw_line in output.splitlines():
        if not raw_line.strip():
            continue

        parts = raw_line.split("|")
        if header is None:
            header = [part.strip() for part in parts]
            continue

        if len(parts) != len(header):
            LOGGER.warning("Skipping malformed sacct row: %s", raw_line)
            continue

        rows.append(dict(zip(header, parts)))

    return rows


def query_accounting(
    job_id: str,
    *,
    runner: Runner | None = None,
    sacct: str = "sacct",
) -> List[RawAccountingRow]:
    """Fetch the accounting rows (job plus steps) of a single job."""

    if runner is None:
        runner = run_sacct
    command = build_sacct_command(job_id, sacct=sacct)
    LOGGER.debug("Running %s", " ".join(command))
    rows = parse_sacct_output(runner(command))
    if not rows:
        LOGGER.debug("sacct returned no rows for job %s", job_id)
    return rows


def query_jobs(
    job_ids: Iterable[str],
    *,
    runner: Runner | None = None,
    sacct: str = "sacct",
) -> List[RawAccountingRow]:
    """Query every job in turn. Failed jobs are logged and left out."""

    rows: List[RawAccountingRow] = []
    for job_id in job_ids:
        try:
            rows.extend(query_accounting(job_id, runner=runner, sacct=sacct))
        except SacctError as exc:
            LOGGER.warning("Skipping job %s: %s", job_id, exc)
    return rows
