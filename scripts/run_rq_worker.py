"""Run an RQ worker inside the Flask app context.

Usage:
  python scripts/run_rq_worker.py

Jobs (email delivery, resume summaries, visitor logging) use `current_app`
and the Flask-SQLAlchemy session, so the worker needs the app context.
"""
import os
import sys

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import redis  # noqa: E402
from rq import Queue, Worker  # noqa: E402

from app import create_app  # noqa: E402


def main():
    app = create_app()
    redis_url = app.config.get('REDIS_URL') or 'redis://localhost:6379/0'
    conn = redis.from_url(redis_url)
    with app.app_context():
        worker = Worker([Queue('default', connection=conn)], connection=conn)
        app.logger.info('RQ worker starting (pid %s)', os.getpid())
        try:
            worker.work(burst=False, with_scheduler=True, logging_level='INFO')
        finally:
            app.logger.info('RQ worker exiting (pid %s)', os.getpid())


if __name__ == '__main__':
    main()
