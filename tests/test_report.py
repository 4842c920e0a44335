import pytest

from slurm_job_report.models import REPORT_COLUMNS
from slurm_job_report.report import NA, build_report, build_report_table, cpu_efficiency


def make_record(**fields) -> dict:
    record = {
        "JobID": "100",
        "JobName": "align",
        "State": "COMPLETED",
        "Elapsed": "01:00:00",
        "NNodes": "1",
        "NCPUS": "4",
        "TotalCPU": "02:00:00",
        "ReqMem": "4000M",
        "MaxRSS": "102400K",
        "AveRSS": "51200K",
        "MaxVMSize": "4G",
        "ExitCode": "1:9",
        "Timelimit": "02:00:00",
        "NodeList": "node001",
        "Start": "2026-10-19T10:00:00",
        "End": "2026-10-19T11:00:00",
        "Submit": "2026-10-19T09:55:00",
        "WorkDir": "/scratch/project",
    }
    record.update(fields)
    return record


def test_cpu_efficiency():
    assert cpu_efficiency(7200, 3600, 4) == 50.0
    assert cpu_efficiency(100, 300, 3) == pytest.approx(100 * 100 / (300 * 3), abs=0.01)


@pytest.mark.parametrize("elapsed, cpus", [(0, 4), (3600, 0), (3600, None)])
def test_cpu_efficiency_undefined(elapsed, cpus):
    assert cpu_efficiency(7200, elapsed, cpus) is None


def test_build_report_normalizes_fields():
    row = build_report(make_record())

    assert row.JobID == "100"
    assert row.NumNodes == 1
    assert row.NumCPUs == 4
    assert row.CPUEfficiency == 50.0
    assert row.ReqMemGB == 3.91
    assert row.MaxRSSGB == 0.1
    assert row.AveRSSGB == 0.05
    assert row.MaxVMSizeGB == 4.0
    assert row.ExitCode == 1
    assert row.KillSignal == 9
    assert row.TimeLimit == "02:00:00"


def test_build_report_column_order():
    columns = list(build_report(make_record()).as_dict())

    assert columns == list(REPORT_COLUMNS)
    assert columns[columns.index("NumCPUs") + 1] == "CPUEfficiency"
    assert columns[columns.index("ExitCode") + 1] == "KillSignal"
    for dropped in ("TotalCPU", "ElapsedSeconds", "CPUTimeSeconds", "NCPUS"):
        assert dropped not in columns


def test_build_report_zero_exit_code():
    row = build_report(make_record(ExitCode="0:0"))

    assert row.ExitCode == 0
    assert row.KillSignal == 0


def test_build_report_missing_values():
    row = build_report(make_record(MaxRSS="", ExitCode="", Elapsed="00:00:00", NCPUS=""))

    assert row.MaxRSSGB is None
    assert row.ExitCode is None
    assert row.KillSignal is None
    assert row.NumCPUs is None
    assert row.CPUEfficiency is None


def test_build_report_absent_fields_use_marker():
    record = make_record()
    del record["WorkDir"], record["MaxVMSize"], record["ExitCode"], record["NNodes"]

    row = build_report(record)

    assert row.WorkDir == NA
    assert row.MaxVMSizeGB == NA
    assert row.ExitCode == NA
    assert row.KillSignal == NA
    assert row.NumNodes == NA


def test_build_report_table_keeps_order():
    rows = build_report_table([make_record(JobID="2"), make_record(JobID="1")])

    assert [row.JobID for row in rows] == ["2", "1"]
