"""
Logging de la app: un handler en el root logger con el correlation ID en cada línea
"""

import logging

from zentype.core.correlation import correlation_id_var

LOG_FORMAT = "%(asctime)s %(levelname)s [%(correlation_id)s] %(name)s: %(message)s"


class CorrelationIdFilter(logging.Filter):
    """Agrega `correlation_id` a cada record para que el formatter lo pueda usar"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = correlation_id_var.get()
        return True


def configure_logging(level: str = "INFO") -> None:
    """Configura el root logger una sola vez (llamarlo de nuevo solo cambia el nivel)"""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_zentype", False):
            return

    handler = logging.StreamHandler()
    handler._zentype = True
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(CorrelationIdFilter())
    root.addHandler(handler)
