"""
Per-module file loggers plus the shared application log.

Each service gets a `ModuleFileLogger` writing its verbose trace to a
dedicated file under `logs/`, while warnings and errors are also forwarded to
the `SmartQuote` root logger (console, WARNING and above).

Usage:
    logger = get_module_logger("PricingService", "pricing.log")
    logger.detail("prompt built (1834 chars)")   # -> logs/pricing.log only
    logger.warning("provider timed out")         # -> logs/pricing.log + console

Tests and packaged builds can silence everything:
    from infrastructure.logging_service import disable_all_logging
    disable_all_logging()
"""

import logging
import sys
from pathlib import Path

ROOT_LOGGER_NAME = "SmartQuote"
LOG_DIR = Path("logs")

# Frozen executables never write a logs/ folder
IS_DIST = hasattr(sys, "_MEIPASS")

_LOGGING_DISABLED = IS_DIST


class ModuleFileLogger:
    """Logger writing to a dedicated detail file and to the main log."""

    def __init__(self, module_name: str, detail_filename: str):
        self.module_name = module_name
        self.detail_filename = detail_filename
        self.main_logger = logging.getLogger(ROOT_LOGGER_NAME)
        self.detail_logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{module_name}.detail")
        self.detail_logger.propagate = False

        if _LOGGING_DISABLED:
            self.detail_logger.setLevel(logging.CRITICAL + 1)
            if not self.detail_logger.hasHandlers():
                self.detail_logger.addHandler(logging.NullHandler())
            if not self.main_logger.hasHandlers():
                self.main_logger.addHandler(logging.NullHandler())
            return

        self.main_logger.setLevel(logging.DEBUG)
        if not self.main_logger.hasHandlers():
            console_handler = logging.StreamHandler()
            console_handler.setFormatter(
                logging.Formatter('%(asctime)s [%(levelname)s] %(name)s: %(message)s', '%H:%M:%S')
            )
            console_handler.setLevel(logging.WARNING)
            self.main_logger.addHandler(console_handler)

        self.detail_logger.setLevel(logging.DEBUG)
        if not self.detail_logger.handlers:
            LOG_DIR.mkdir(exist_ok=True)
            log_path = LOG_DIR / Path(detail_filename).name
            detail_handler = logging.FileHandler(str(log_path), mode='w', encoding='utf-8')
            detail_handler.setFormatter(logging.Formatter('%(asctime)s [%(levelname)s]: %(message)s',
                                                          datefmt='%H:%M:%S'))
            detail_handler.setLevel(logging.DEBUG)
            self.detail_logger.addHandler(detail_handler)

    def detail(self, message: str):
        """Verbose trace, detail file only."""
        self.detail_logger.debug(message)

    def debug(self, message: str):
        self.detail_logger.debug(message)

    def info(self, message: str):
        self.detail_logger.info(message)

    def warning(self, message: str):
        self.detail_logger.warning(message)
        self.main_logger.warning(f"[{self.module_name}] {message}")

    def error(self, message: str, exc_info: bool = False):
        self.detail_logger.error(message, exc_info=exc_info)
        self.main_logger.error(f"[{self.module_name}] {message}", exc_info=exc_info)

    def exception(self, message: str):
        self.detail_logger.exception(message)
        self.main_logger.exception(f"[{self.module_name}] {message}")


_module_loggers = {}


def get_module_logger(module_name: str, detail_filename: str) -> ModuleFileLogger:
    """Return the cached logger for a module, creating it on first use."""
    key = f"{module_name}:{detail_filename}"
    if key not in _module_loggers:
        _module_loggers[key] = ModuleFileLogger(module_name, detail_filename)
    return _module_loggers[key]


def disable_all_logging():
    """Silence every logger created after this call (console and files)."""
    global _LOGGING_DISABLED
    _LOGGING_DISABLED = True


def enable_logging():
    """Re-enable logging for loggers created after this call."""
    global _LOGGING_DISABLED
    _LOGGING_DISABLED = False
