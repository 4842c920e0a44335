from __future__ import annotations

import csv
import io
import json
from typing import Any, Sequence

from tabulate import tabulate

try:  # pragma: no cover - dependency availability is environment specific
    import yaml
except ImportError:  # pragma: no cover - handled by check_format
    yaml = None

from .models import REPORT_COLUMNS, JobReport
from .report import NA

FORMATS = ("table", "tsv", "json", "yaml")


class OutputError(RuntimeError):
    """Raised when a report format cannot be produced."""


def yaml_available() -> bool:
    return yaml is not None


def check_format(fmt: str) -> None:
    if fmt not in FORMATS:
        raise OutputError(f"Unknown output format '{fmt}'")
    if fmt == "yaml" and not yaml_available():
        raise OutputError("YAML output requires PyYAML (pip install PyYAML)")


def _text_cell(value: Any) -> str:
    return NA if value is None else str(value)


def render_table(rows: Sequence[JobReport]) -> str:
    data = [[_text_cell(value) for value in row.as_dict().values()] for row in rows]
    return tabulate(data, headers=list(REPORT_COLUMNS), tablefmt="plain", disable_numparse=True)


def render_tsv(rows: Sequence[JobReport]) -> str:
    handle = io.StringIO()
    writer = csv.writer(handle, delimiter="\t", lineterminator="\n")
    writer.writerow(REPORT_COLUMNS)
    for row in rows:
        writer.writerow([_text_cell(value) for value in row.as_dict().values()])
    return handle.getvalue().rstrip("\n")


def render_json(rows: Sequence[JobReport]) -> str:
    return json.dumps([row.as_dict() for row in rows], indent=2)


def render_yaml(rows: Sequence[JobReport]) -> str:
    check_format("yaml")
    return yaml.safe_dump(
        [row.as_dict() for row in rows],
        default_flow_style=False,
        sort_keys=False,
    ).rstrip("\n")


_RENDERERS = {
    "table": render_table,
    "tsv": render_tsv,
    "json": render_json,
    "yaml": render_yaml,
}


def render(rows: Sequence[JobReport], fmt: str = "table") -> str:
    check_format(fmt)
    return _RENDERERS[fmt](rows)
