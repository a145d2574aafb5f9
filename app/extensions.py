from flask_sqlalchemy import SQLAlchemy
from flask_login import LoginManager
from flask_migrate import Migrate
from redis import Redis
from rq import Queue
from flask import current_app

# RQ-only keyword arguments that must not reach the job function when it
# runs inline
RQ_KEYS = {'job_timeout', 'timeout', 'at_front', 'depends_on', 'result_ttl', 'ttl', 'meta', 'description', 'failure_ttl'}


class RQWrapper:
    def __init__(self):
        self.redis = None
        self.queue = None

    def init_app(self, app):
        url = app.config.get("REDIS_URL")
        if not url:
            app.logger.info('REDIS_URL not set, background jobs run inline')
            self.redis = None
            self.queue = None
            return
        try:
            self.redis = Redis.from_url(url)
            self.queue = Queue("default", connection=self.redis)
        except Exception:
            # no redis server (dev machine): jobs run inline
            app.logger.exception('Redis/RQ init failed, falling back to sync execution')
            self.redis = None
            self.queue = None

    def _run_inline(self, args, kwargs):
        func = args[0] if args else None
        func_args = args[1:]
        safe_kwargs = {k: v for k, v in kwargs.items() if k not in RQ_KEYS}
        if not func:
            return None
        try:
            return func(*func_args, **safe_kwargs)
        except Exception:
            current_app.logger.exception('Synchronous job execution failed: %s', getattr(func, '__name__', func))
            return None

    def enqueue(self, *args, **kwargs):
        """Enqueue on RQ when available, otherwise run the job in-process.

        Job failures never propagate to the caller in either mode.
        """
        if not self.queue:
            return self._run_inline(args, kwargs)
        try:
            return self.queue.enqueue(*args, **kwargs)
        except Exception:
            current_app.logger.exception('RQ enqueue failed, falling back to sync execution')
            return self._run_inline(args, kwargs)


db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
rq = RQWrapper()
