from __future__ import annotations

import logging
import sys
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path

from notes_widget.settings import APP_NAME, LOG_PATH

SESSION_ID = uuid.uuid4().hex[:8]


class EnsureSessionFilter(logging.Filter):
    """Ensure record.session exists so Formatter never crashes."""
    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "session"):
            record.session = SESSION_ID
        return True


class SessionAdapter(logging.LoggerAdapter):
    def process(self, msg, kwargs):
        extra = kwargs.setdefault("extra", {})
        extra.setdefault("session", SESSION_ID)
        return msg, kwargs


def setup_logging(*, log_path: Path = LOG_PATH, name: str = APP_NAME) -> SessionAdapter:
    """
    Configure application-wide logging (rotating file + console).
    Library modules only call logging.getLogger(APP_NAME); the host app calls this once.
    """
    log_path = Path(log_path)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    logger.propagate = False

    # Prevent duplicate handlers on repeated setup
    if logger.handlers:
        return SessionAdapter(logger, {})

    fmt = logging.Formatter(
        "%(asctime)s | %(levelname)s | %(name)s | %(message)s | sid=%(session)s"
    )
    session_filter = EnsureSessionFilter()

    fh = RotatingFileHandler(
        log_path, maxBytes=2 * 1024 * 1024, backupCount=5, encoding="utf-8"
    )
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(fmt)
    fh.addFilter(session_filter)

    ch = logging.StreamHandler(sys.stdout or sys.stderr)
    ch.setLevel(logging.INFO)
    ch.setFormatter(fmt)
    ch.addFilter(session_filter)

    logger.addHandler(fh)
    logger.addHandler(ch)

    logger.info("Logging initialized. log_file=%s", log_path)
    return SessionAdapter(logger, {})


def install_global_exception_hooks(log: logging.LoggerAdapter) -> None:
    """Route uncaught Python exceptions and Qt messages into the log."""

    def _excepthook(exc_type, exc, tb):
        log.critical("Uncaught exception", exc_info=(exc_type, exc, tb))
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    try:
        from PySide6.QtCore import qInstallMessageHandler

        def _qt_message_handler(mode, context, message):
            try:
                file = getattr(context, "file", None)
                line = getattr(context, "line", None)
                func = getattr(context, "function", None)
                where = f"{file}:{line} {func}" if file or line or func else "unknown"
            except Exception:
                where = "unknown"

            log.log(_qt_level(mode), "Qt: %s | where=%s", message, where)

        qInstallMessageHandler(_qt_message_handler)
        log.info("Qt message handler installed")
    except Exception:
        log.exception("Failed to install Qt message handler")


def _qt_level(mode) -> int:
    # QtMsgType: 0 debug, 1 warning, 2 critical, 3 fatal, 4 info
    try:
        m = int(getattr(mode, "value", mode))
    except Exception:
        return logging.WARNING
    return {
        0: logging.DEBUG,
        2: logging.ERROR,
        3: logging.CRITICAL,
        4: logging.INFO,
    }.get(m, logging.WARNING)
