from __future__ import annotations

import logging
from typing import Dict, Iterable

from .models import RawAccountingRow

LOGGER = logging.getLogger(__name__)

# Peak usage is only measured on the batch step, the allocation row carries
# the scheduling metadata.
BATCH_SUFFIX = ".batch"
RESOURCE_USAGE_FIELDS = ("MaxRSS", "AveRSS", "MaxVMSize")


def base_job_id(job_id: str) -> str:
    return job_id.split(".", 1)[0]


def reconcile(rows: Iterable[RawAccountingRow]) -> Dict[str, RawAccountingRow]:
    """Merge job and job-step rows into one record per base job id.

    The first row seen for a base id becomes its record. A later ``.batch``
    step row only contributes its non-empty resource usage fields; every
    other step is ignored.
    """

    records: Dict[str, RawAccountingRow] = {}

    for row in rows:
        job_id = row.get("JobID", "").strip()
        if not job_id:
            LOGGER.debug("Ignoring sacct row without JobID: %s", row)
            continue

        base_id = base_job_id(job_id)
        if base_id not in records:
            record = dict(row)
            record["JobID"] = base_id
            records[base_id] = record
            continue

        if job_id[len(base_id) :] != BATCH_SUFFIX:
            continue

        record = records[base_id]
        for field in RESOURCE_USAGE_FIELDS:
            value = row.get(field, "").strip()
            if value:
                record[field] = value

    return records
