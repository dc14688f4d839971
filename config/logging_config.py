import logging

from config.settings import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Configure the root logger once for CLI entry points."""
    logging.basicConfig(
        level=getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO),
        format=LOG_FORMAT,
    )
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
