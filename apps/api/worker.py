"""RQ worker process entrypoint for analysis jobs."""

import argparse
import logging

from rq import Worker

from services.analysis_queue import ANALYSIS_QUEUE_NAME, get_redis_connection


def main():
    parser = argparse.ArgumentParser(description="Run the analysis job worker.")
    parser.add_argument("--burst", action="store_true", help="exit once the queue is empty")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO)
    worker = Worker([ANALYSIS_QUEUE_NAME], connection=get_redis_connection())
    worker.work(with_scheduler=not args.burst, burst=args.burst)


if __name__ == "__main__":
    main()
