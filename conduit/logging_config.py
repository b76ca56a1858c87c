"""
Root logger configuration.

Library modules only ever call ``logging.getLogger(__name__)``; entry
points (scripts, the Alembic environment, an embedding web app) call
``setup_logging`` once to attach a handler.
"""
import logging

_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str = "INFO") -> None:
    """
    Attach a console handler to the root logger and set its level.

    Does nothing when the root logger already has handlers, so calling
    it twice (or under pytest's log capture) is harmless.
    """
    root = logging.getLogger()
    if root.handlers:
        return

    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(fmt=_FORMAT, datefmt=_DATE_FORMAT))
    root.addHandler(handler)
