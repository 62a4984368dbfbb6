from __future__ import annotations

import argparse
import asyncio
import logging
import sys

import uvicorn

from outage_watch.config import Settings, load_settings
from outage_watch.core.errors import OutageWatchError
from outage_watch.main import build_worker, configure_logging
from outage_watch.observability.metrics import Metrics
from outage_watch.storage.repository import StateRepository


def run_once(settings: Settings) -> int:
    configure_logging(settings.log_level)
    repository = StateRepository(settings.database_path)
    repository.init_db()

    try:
        worker = build_worker(settings, repository=repository, metrics=Metrics())
        status = asyncio.run(worker.run_once())
    except OutageWatchError as exc:
        logging.getLogger("outage_watch").error("Check failed: %s", exc)
        return 1

    logging.getLogger("outage_watch").info("Check finished: %s", status)
    return 0


def serve(settings: Settings) -> int:
    uvicorn.run(
        "outage_watch.main:create_app",
        factory=True,
        host=settings.app_host,
        port=settings.app_port,
        reload=False,
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="outage-watch")
    parser.add_argument(
        "command",
        nargs="?",
        choices=("run", "serve"),
        default="run",
        help="run: check once and exit (for cron); serve: HTTP service with polling worker",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    if args.command == "serve":
        return serve(settings)
    return run_once(settings)


if __name__ == "__main__":
    sys.exit(main())
