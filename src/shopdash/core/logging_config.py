import logging
import sys

from .config import LOG_LEVEL


class NamespaceFilter(logging.Filter):
    def __init__(self, allowed_namespaces=None):
        super().__init__()
        self.allowed_namespaces = allowed_namespaces if allowed_namespaces is not None else []

    def filter(self, record):
        if not self.allowed_namespaces:
            return True # No namespaces configured, let everything through
        return any(record.name.startswith(ns) for ns in self.allowed_namespaces)


log_formatter = logging.Formatter(
    fmt="%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


def configure_logging(level: str = LOG_LEVEL, allowed_namespaces=None) -> logging.Logger:
    """Attach the console handler to the application's root logger.

    Safe to call more than once: the handler is only added the first time.
    Modules log through ``logging.getLogger(__name__)`` and so inherit from
    the ``shopdash`` logger configured here.
    """
    app_logger = logging.getLogger("shopdash")
    app_logger.setLevel(level)

    if not any(getattr(h, "_shopdash_console", False) for h in app_logger.handlers):
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(log_formatter)
        console_handler._shopdash_console = True
        if allowed_namespaces:
            console_handler.addFilter(NamespaceFilter(allowed_namespaces))
        app_logger.addHandler(console_handler)

    return app_logger
