import logging

from inkflow.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None) -> None:
    """Настройка логирования приложения (однократно при старте)"""
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)
    # SQL-эхо управляется настройкой sql_echo, а не общим уровнем
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
