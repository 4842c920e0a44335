"""Turn reconciled sacct records into report rows."""

from __future__ import annotations

from typing import Iterable, List

from .models import JobReport, RawAccountingRow
from .units import parse_duration, parse_int, parse_memory, split_exit_code

# Marker for a column sacct did not return at all.
NA = "NA"

# sacct column -> report column
FIELD_NAMES = {
    "JobID": "JobID",
    "JobName": "JobName",
    "State": "State",
    "Elapsed": "Elapsed",
    "NNodes": "NumNodes",
    "NCPUS": "NumCPUs",
    "ReqMem": "ReqMemGB",
    "MaxRSS": "MaxRSSGB",
    "AveRSS": "AveRSSGB",
    "MaxVMSize": "MaxVMSizeGB",
    "Timelimit": "TimeLimit",
    "NodeList": "NodeList",
    "Start": "Start",
    "End": "End",
    "Submit": "Submit",
    "WorkDir": "WorkDir",
}
TEXT_FIELDS = ("JobID", "JobName", "State", "Elapsed", "Timelimit", "NodeList", "Start", "End", "Submit", "WorkDir")
COUNT_FIELDS = ("NNodes", "NCPUS")
MEMORY_FIELDS = ("ReqMem", "MaxRSS", "AveRSS", "MaxVMSize")


def cpu_efficiency(cpu_seconds: float, elapsed_seconds: float, cpus: int | None) -> float | None:
    """Percentage of the allocated CPU time that was actually used.

    Returns ``None`` when the job has no elapsed time or no CPUs, since the
    ratio is not defined there.
    """

    if not cpus or cpus <= 0 or elapsed_seconds <= 0:
        return None
    return round(100.0 * cpu_seconds / (elapsed_seconds * cpus), 2)


def _memory_gb(value: str) -> float | None:
    gigabytes = parse_memory(value)
    return None if gigabytes is None else round(gigabytes, 2)


def build_report(record: RawAccountingRow) -> JobReport:
    values: dict[str, object] = {}

    for field in TEXT_FIELDS:
        values[FIELD_NAMES[field]] = record.get(field, NA)

    for field in COUNT_FIELDS:
        raw = record.get(field)
        values[FIELD_NAMES[field]] = NA if raw is None else parse_int(raw)

    for field in MEMORY_FIELDS:
        raw = record.get(field)
        values[FIELD_NAMES[field]] = NA if raw is None else _memory_gb(raw)

    raw_exit = record.get("ExitCode")
    if raw_exit is None:
        values["ExitCode"] = values["KillSignal"] = NA
    else:
        values["ExitCode"], values["KillSignal"] = split_exit_code(raw_exit)

    values["CPUEfficiency"] = cpu_efficiency(
        parse_duration(record.get("TotalCPU")),
        parse_duration(record.get("Elapsed")),
        parse_int(record.get("NCPUS")),
    )

    return JobReport(**values)


def build_report_table(records: Iterable[RawAccountingRow]) -> List[JobReport]:
    return [build_report(record) for record in records]
