# lms/workers/worker_main.py

from rq import Queue, SimpleWorker

from lms.core.logging_config import setup_logging
from lms.workers.queue import PROGRESS_QUEUE_NAME, get_redis_connection

QUEUE_NAMES = [PROGRESS_QUEUE_NAME]


def main():
    setup_logging()
    redis_conn = get_redis_connection()
    queues = [Queue(name, connection=redis_conn) for name in QUEUE_NAMES]
    worker = SimpleWorker(queues, connection=redis_conn)
    worker.work()


if __name__ == "__main__":
    main()
