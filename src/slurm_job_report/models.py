from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any, Dict

# One sacct output line keyed by column name, values verbatim.
RawAccountingRow = Dict[str, str]


@dataclass(slots=True)
class JobReport:
    """One report row per logical job, fields in output column order."""

    JobID: str
    JobName: str
    State: str
    Elapsed: str
    NumNodes: int | str | None
    NumCPUs: int | str | None
    CPUEfficiency: float | None
    ReqMemGB: float | str | None
    MaxRSSGB: float | str | None
    AveRSSGB: float | str | None
    MaxVMSizeGB: float | str | None
    ExitCode: int | str | None
    KillSignal: int | str | None
    TimeLimit: str
    NodeList: str
    Start: str
    End: str
    Submit: str
    WorkDir: str

    def as_dict(self) -> dict[str, Any]:
        return asdict(self)


REPORT_COLUMNS = tuple(field.name for field in fields(JobReport))
