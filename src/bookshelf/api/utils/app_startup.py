import logging
import sys
from pathlib import Path

from loguru import logger

from src.bookshelf.runtime.config.config_data import LoggingConfig
from src.bookshelf.runtime.context import get_config

PLAIN_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "[<cyan>{extra[request_id]}</cyan>] | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

# Third-party loggers and the minimum level they are allowed to emit at
STDLIB_LEVELS = {
    "pymongo": logging.WARNING,
    "pymongo.serverSelection": logging.WARNING,
    "httpx": logging.WARNING,
    "httpcore": logging.WARNING,
    "strawberry": logging.INFO,
    "uvicorn": logging.INFO,
    "uvicorn.error": logging.INFO,
    "uvicorn.access": logging.CRITICAL,
}


class InterceptHandler(logging.Handler):
    """Forward stdlib ``logging`` records (uvicorn, pymongo, strawberry) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Requests are logged by the HTTP middleware
        if record.name == "uvicorn.access":
            return

        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        logger.opt(depth=2, exception=record.exc_info).bind(
            logger_name=record.name
        ).log(level, record.getMessage())


def _add_file_sink(cfg: LoggingConfig, verbose_tracebacks: bool) -> None:
    path = Path(cfg.file)
    path.parent.mkdir(parents=True, exist_ok=True)
    serialize = cfg.format == "json"
    logger.add(
        str(path),
        level=cfg.level,
        format="{message}" if serialize else PLAIN_FORMAT,
        serialize=serialize,
        rotation=f"{cfg.max_size_mb} MB",
        retention=cfg.backup_count,
        compression="zip",
        enqueue=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )


def _intercept_stdlib() -> None:
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in list(logging.root.manager.loggerDict):
        existing = logging.getLogger(name)
        existing.handlers = []
        existing.propagate = True
    for name, level in STDLIB_LEVELS.items():
        logging.getLogger(name).setLevel(level)


def configure_logging() -> None:
    """Route every log line through loguru: colored stderr plus an optional file."""
    config = get_config()
    cfg = config.logging
    verbose_tracebacks = config.app.environment != "production"

    logger.remove()
    # {extra[request_id]} is filled by the request middleware; "-" elsewhere
    logger.configure(
        extra={"request_id": "-"},
        patcher=lambda record: record["extra"].setdefault("request_id", "-"),
    )

    logger.add(
        sys.stderr,
        level=cfg.level,
        format=PLAIN_FORMAT,
        colorize=True,
        backtrace=verbose_tracebacks,
        diagnose=verbose_tracebacks,
    )
    if cfg.file:
        _add_file_sink(cfg, verbose_tracebacks)

    _intercept_stdlib()

    logger.bind(
        app_level=cfg.level,
        app_format=cfg.format,
        app_file=cfg.file,
        environment=config.app.environment,
    ).info("Logging configured")
