"""Logging setup shared by the API process and Celery workers."""
import logging
import sys

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    root = logging.getLogger()
    if getattr(root, "_devtoolshub_configured", False):
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(settings.LOG_LEVEL.upper())

    # Stripe's SDK logs every request at INFO
    logging.getLogger("stripe").setLevel(logging.WARNING)
    root._devtoolshub_configured = True
