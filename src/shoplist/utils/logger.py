"""Loguru setup for shoplist.

Records go to a colored stderr sink and to a rotating JSON file. Modules get
their logger from :func:`get_logger`, and keyword arguments given to a log
call end up as structured extras.
"""
import sys
from pathlib import Path
from typing import Optional
from loguru import logger

from shoplist.config.settings import ShopListSettings, get_settings

_FORMATS = {
    "detailed": (
        "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
        "<level>{message}</level> | "
        "<level>{extra}</level>"
    ),
    "simple": (
        "<green>{time:HH:mm:ss}</green> | "
        "<level>{level: <8}</level> | "
        "<cyan>{extra[name]}</cyan> | "
        "<level>{message}</level>"
    ),
}

_configured = False


def configure_logging(settings: Optional[ShopListSettings] = None) -> None:
    """Replace loguru's default sink with the shoplist sinks. Runs once."""
    global _configured
    if _configured:
        return
    settings = settings or get_settings()
    log_format = _FORMATS.get(settings.LOG_FORMAT, _FORMATS["detailed"])

    logger.remove()
    # Records logged through the bare loguru logger still need a name
    logger.configure(extra={"name": "shoplist"})
    logger.add(
        sys.stderr,
        format=log_format,
        level=settings.LOG_LEVEL,
        colorize=True,
        backtrace=True,
        diagnose=False,
    )

    log_file = Path(settings.LOG_FILE or Path("logs") / "shoplist.log")
    log_file.parent.mkdir(parents=True, exist_ok=True)
    logger.add(
        log_file,
        level=settings.LOG_LEVEL,
        rotation=f"{settings.LOG_ROTATION_SIZE_MB} MB",
        retention=f"{settings.LOG_RETENTION_DAYS} days",
        compression="zip",
        serialize=True,
        backtrace=True,
        diagnose=False,
        enqueue=True,
    )
    _configured = True


def get_logger(name: str):
    """Logger bound to a ``shoplist.``-prefixed component name."""
    configure_logging()
    if not name.startswith("shoplist.") and name != "__main__":
        name = f"shoplist.{name}"
    return logger.bind(name=name)
