import os
import logging
from celery import Celery

logger = logging.getLogger(__name__)


def make_celery() -> Celery:
    """
    Base Celery instance for deployhub. Imports run here so an admin request
    never waits on RPC reads or large artifact folders.
    """
    celery_app = Celery("deployhub")

    broker_url = os.getenv("CELERY_BROKER_URL", "redis://redis:6379/0")
    result_backend = os.getenv("CELERY_RESULT_BACKEND", broker_url)

    celery_app.conf.update(
        broker_url=broker_url,
        result_backend=result_backend,
        task_ignore_result=False,
        task_serializer="json",
        accept_content=["json"],
        result_serializer="json",
        timezone=os.getenv("TZ", "UTC"),
        enable_utc=True,
        # one import per worker process at a time keeps writes single-writer
        worker_prefetch_multiplier=1,
        task_acks_late=True,
    )

    try:
        conn = celery_app.connection()
        conn.ensure_connection(max_retries=1)
        logger.info("Celery connected to broker %s", broker_url)
    except Exception as e:
        logger.error("Could not connect to Celery broker (%s): %s", broker_url, e)

    return celery_app


celery = make_celery()


def _init_celery_with_flask():
    """Run every task inside a Flask app context."""
    from deployhub import create_app
    config_name = os.getenv("FLASK_ENV", "development")
    flask_app = create_app(config_name)

    broker = flask_app.config.get("CELERY_BROKER_URL")
    backend = flask_app.config.get("CELERY_RESULT_BACKEND") or broker
    if broker:
        celery.conf.broker_url = broker
    if backend:
        celery.conf.result_backend = backend

    TaskBase = celery.Task

    class ContextTask(TaskBase):
        def __call__(self, *args, **kwargs):
            with flask_app.app_context():
                return TaskBase.__call__(self, *args, **kwargs)

    celery.Task = ContextTask
    celery.set_default()

    with flask_app.app_context():
        from deployhub.tasks import deploy_tasks  # noqa: F401

    return flask_app


_flask_app = _init_celery_with_flask()
