#!/usr/bin/env python
"""
Start the evaluation worker.

    python -m workers.startup            # long-running
    python -m workers.startup --burst    # drain the queue, then exit

Equivalent to ``arq workers.settings.WorkerSettings``.
"""

import argparse

from arq import run_worker

from config.settings import settings
from config.logging_config import setup_logging
from workers.settings import WorkerSettings


def main(argv=None):
    parser = argparse.ArgumentParser(description="Tender evaluation worker")
    parser.add_argument("--burst", action="store_true", help="exit once the queue is empty")
    args = parser.parse_args(argv)

    logger = setup_logging(log_to_file=True)
    logger.info(
        f"Starting evaluation worker "
        f"(evaluator: {settings.evaluator_backend.value}, burst: {args.burst})"
    )
    run_worker(WorkerSettings, burst=args.burst)


if __name__ == "__main__":
    main()
