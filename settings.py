# settings.py
import logging
import os

from logs import get_logger

log = get_logger(__name__)


def _env_number(name, default, cast=int):
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        log.warning("Ignoring invalid %s=%r, using %s", name, raw, default)
        return default
    if value <= 0:
        log.warning("Ignoring non-positive %s=%r, using %s", name, raw, default)
        return default
    return value


HOST = os.getenv("FALE_HOST", "0.0.0.0")
PORT = _env_number("FALE_PORT", 3000)
FETCH_TIMEOUT = _env_number("FALE_FETCH_TIMEOUT", 15.0, cast=float)

USER_AGENT = os.getenv(
    "USER_AGENT",
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:120.0) Gecko/20100101 Firefox/120.0"
)

def _env_log_level(name, default="INFO"):
    raw = os.getenv(name, "").strip().upper()
    if not raw:
        return default
    if not isinstance(logging.getLevelName(raw), int):
        log.warning("Ignoring unknown %s=%r, using %s", name, raw, default)
        return default
    return raw


LOG_LEVEL = _env_log_level("FALE_LOG_LEVEL")
LOG_FILE = os.getenv("FALE_LOG_FILE") or None


def as_flask_config():
    """Settings in the shape ``app.config.from_mapping`` expects."""
    return {
        "FETCH_TIMEOUT": FETCH_TIMEOUT,
        "USER_AGENT": USER_AGENT,
    }
