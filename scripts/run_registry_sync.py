"""
Run a death registry sync from CLI.

    python -m scripts.run_registry_sync --month 202512
    python -m scripts.run_registry_sync --year 2025
    python -m scripts.run_registry_sync --month 202512 --recover
"""

from __future__ import annotations

import argparse
import json
import logging

from app.connectors.base import RemoteAPIError
from app.services.registry_sync_service import (
    RegistrySyncService,
    SyncAlreadyRunningError,
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Import death registry records as memorials.")
    period = parser.add_mutually_exclusive_group(required=True)
    period.add_argument("--month", dest="month", help="Month to sync, YYYYMM.")
    period.add_argument("--year", dest="year", help="Year to sync, YYYY (initial load).")
    parser.add_argument(
        "--recover",
        action="store_true",
        help="Mark RUNNING jobs left by a crashed process as FAILED first. "
        "Only use when no API server is syncing.",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    service = RegistrySyncService(recover_on_first_sync=False)
    try:
        if args.recover:
            service.recover_orphaned_jobs()
        if args.month:
            result = service.sync_month(args.month)
        else:
            result = service.sync_year(args.year)
    except ValueError as exc:
        parser.error(str(exc))
    except (RemoteAPIError, SyncAlreadyRunningError) as exc:
        print(json.dumps({"error": str(exc)}, indent=2))
        return 1

    payload = {
        "job_id": str(result.job_id),
        "records_processed": result.records_processed,
        "new_profiles": result.new_profiles,
        "skipped_duplicates": result.skipped_duplicates,
        "errors": result.errors,
        "duration_ms": result.duration_ms,
    }
    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
