import logging
import sys
import structlog
from wanderlust.core.config import settings

# Client libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "openai")

def configure_logging():
    """
    Route stdlib and structlog output through one processor chain:
    console rendering in development, JSON lines everywhere else.
    """
    is_local = settings.ENV.lower() == "development"
    level = logging.getLevelName(settings.LOG_LEVEL.upper())
    if not isinstance(level, int):
        level = logging.INFO

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.CallsiteParameterAdder(
            {
                structlog.processors.CallsiteParameter.FILENAME,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            }
        ),
    ]

    if is_local:
        processors = shared_processors + [structlog.dev.ConsoleRenderer()]
    else:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer()
        ]

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # force=True so a second call (tests, reload) does not stack handlers
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level, force=True)

    for _log in ["uvicorn", "uvicorn.error", "uvicorn.access"]:
        logger = logging.getLogger(_log)
        logger.handlers = []
        logger.propagate = True

    for _log in NOISY_LOGGERS:
        logging.getLogger(_log).setLevel(max(level, logging.WARNING))
