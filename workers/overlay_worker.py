"""RQ worker entrypoint for emoji overlay jobs.

This module connects to a Redis instance using connection details from
environment variables and listens on the overlay queue. When jobs are
submitted by the API (``POST /events`` with ``QUEUE_BACKEND=rq``), they
are executed in this worker process. The task itself is
``faceswap.jobs.process_image_job``.
"""

from __future__ import annotations

import logging

from redis import Redis
from rq import Queue, Worker

from faceswap.config import load_settings


def run_worker() -> None:
    """Start an RQ worker listening on the configured queue."""
    settings = load_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    conn = Redis(host=settings.redis_host, port=settings.redis_port, db=0)
    queue = Queue(settings.rq_queue, connection=conn)
    Worker([queue], connection=conn).work(with_scheduler=True)


if __name__ == "__main__":
    run_worker()
