from __future__ import annotations

import logging
import sys

from spotrate.core.config import settings
from spotrate.core.logging_config import configure_logging
from spotrate.db.session import SessionLocal
from spotrate.repositories.unit_of_work import SqlUnitOfWork
from spotrate.services.reconcile import reconcile_spots

logger = logging.getLogger("reconcile_spots")


def main() -> int:
    configure_logging(log_dir=settings.log_dir, level=settings.log_level)

    db = SessionLocal()
    try:
        ok, failed = reconcile_spots(SqlUnitOfWork(db), sys.argv[1:] or None)
    finally:
        db.close()

    logger.info("Reconciled %s spots, %s failed", ok, failed)
    return 1 if failed else 0


if __name__ == "__main__":
    raise SystemExit(main())
