import inspect
import logging

from loguru import logger


class InterceptHandler(logging.Handler):
    """
    Sends records of the standard `logging` module (uvicorn, sqlalchemy, aiokafka)
    through loguru so the whole service logs to a single sink.
    """

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find the caller from where the logged message originated
        frame, depth = inspect.currentframe(), 0
        while frame and (depth == 0 or frame.f_code.co_filename == logging.__file__):
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())
