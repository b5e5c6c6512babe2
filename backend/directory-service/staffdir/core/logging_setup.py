import logging

from staffdir.core.config import settings

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format=LOG_FORMAT,
    )
    # SQL 로그는 SQL_ECHO로만 제어
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
