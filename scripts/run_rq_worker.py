"""Run an RQ worker inside the Flask app context.

Usage:
  source .venv/bin/activate
  export OBJC_DISABLE_INITIALIZE_FORK_SAFETY=YES   # macOS fork safety if needed
  python scripts/run_rq_worker.py

This ensures the app and extensions are initialized in the worker process
so `run_ai_evaluation` jobs can use `current_app` and the Flask-SQLAlchemy
session normally.
"""

import logging
import os
import sys

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

import redis
from rq import Queue, Worker

from aceleradora import create_app

log = logging.getLogger('rq_worker')


def main():
    app = create_app()
    level = str(app.config.get('LOG_LEVEL', 'INFO')).upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')
    redis_url = app.config.get('REDIS_URL') or 'redis://localhost:6379/0'
    conn = redis.from_url(redis_url)
    with app.app_context():
        q = Queue('default', connection=conn)
        worker = Worker([q], connection=conn)
        log.info('RQ worker starting (pid %s) on %s', os.getpid(), redis_url)
        try:
            worker.work(burst=False, with_scheduler=True, logging_level=level)
        finally:
            log.info('RQ worker exiting (pid %s)', os.getpid())


if __name__ == '__main__':
    main()
