# invoicing/core/logging_config.py

import logging
import sys

from loguru import logger

from invoicing.config.settings import settings

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[source]}</cyan>:<cyan>{function}</cyan> - "
    "<level>{message}</level>"
)

# Named stdlib loggers used by the invoicing modules
APP_LOGGERS = (
    "gst_calculator",
    "tds_calculator",
    "invoice_numbering",
    "invoice_assembly",
    "invoice_lifecycle",
    "invoice_document",
    "invoice_pdf",
    "api.v1",
)


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the stdlib logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.bind(source=record.name).opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging() -> None:
    """
    Make loguru the only sink. Stdlib records (uvicorn, sqlalchemy and the
    invoicing modules) are routed through ``InterceptHandler``.
    """
    level = settings.LOG_LEVEL.upper()

    logger.remove()
    logger.configure(extra={"source": settings.APP_NAME})
    logger.add(
        sys.stdout,
        format=LOG_FORMAT,
        level=level,
        colorize=True,
        backtrace=False,
        diagnose=False,
    )

    logging.basicConfig(handlers=[InterceptHandler()], level=logging.INFO, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
    for name in APP_LOGGERS:
        logging.getLogger(name).setLevel(level)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
