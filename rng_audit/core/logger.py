import logging
from logging.handlers import RotatingFileHandler
from typing import Any, Final

import numpy as np
import structlog

from rng_audit.core.config import env_config

# Longer arrays, lists and tuples (bit sequences, p-value lists) are logged as a summary
MAX_LOGGED_ITEMS: Final[int] = 16


def setup_logging(level: int | str) -> None:
    handlers: list[logging.Handler] = [logging.StreamHandler()]

    if env_config.LOG_TO_FILE:
        handlers.append(
            RotatingFileHandler(
                env_config.LOGS_DIR / f'{env_config.APP_NAME.lower()}.log',
                maxBytes=10 * 1024 * 1024,
                backupCount=5,
                encoding='utf-8',
            )
        )

    for handler in handlers:
        handler.setLevel(level)

    logging.basicConfig(format='%(message)s', handlers=handlers, level=level)


def compact_values(_logger: Any, _method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Numpy scalars become plain numbers, long sequences a short summary"""
    for key, value in event_dict.items():
        if isinstance(value, np.generic):
            event_dict[key] = value.item()
        elif isinstance(value, np.ndarray | list | tuple) and len(value) > MAX_LOGGED_ITEMS:
            event_dict[key] = f'<{type(value).__name__} of {len(value)} items>'
    return event_dict


def configure_structlog() -> None:
    render_method = structlog.dev.ConsoleRenderer() if env_config.DEBUG else structlog.processors.JSONRenderer()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt=env_config.LOG_DATE_FORMAT, utc=True),
            structlog.processors.CallsiteParameterAdder(
                parameters=[
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                    # trials run on a thread pool
                    structlog.processors.CallsiteParameter.THREAD_NAME,
                ]
            ),
            compact_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            render_method,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, level: int | str = env_config.LOG_LEVEL) -> structlog.stdlib.BoundLogger:
    if not structlog.is_configured():
        setup_logging(level)
        configure_structlog()
    return structlog.get_logger(name)
