"""Recompute summaries for punches the clock-out handler did not finish.

Run periodically (cron) after the working day:

    python scripts/reconcile_summaries.py --limit 500
"""

from __future__ import annotations

import argparse
import importlib
import logging
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.attendance_engine.attendance_engine.container import build_container

logger = logging.getLogger("reconcile_summaries")


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--limit", type=int, default=None, help="max punches to pick up in one run")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    logging.basicConfig(
        level=getattr(logging, str(getattr(settings, "LOG_LEVEL", "INFO")).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)
    processed = container.summary_service.reconcile_unprocessed(args.limit)
    logger.info("Reconciled %s user-day(s)", processed)


if __name__ == "__main__":
    main()
