import logging
import os
from logging.handlers import RotatingFileHandler
from places_api.core.config import settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

class LoggerConfig:
    """
    Logger for the place query service: rotating file (10 MB x 5) plus console.
    Provider errors and rejected gateway requests are logged here; clients only
    ever see the generic `{"error": ...}` text.
    """
    def __init__(self, level=20, logger_name="NEARBY-BE", log_directory="logs", log_file="app.log"):
        self.level = level
        self.log_file_path = os.path.join(os.path.abspath(log_directory), log_file)
        self.logger = logging.getLogger(logger_name)
        try:
            self.setup_logger()
        except OSError as e:
            # Read-only filesystem: keep console logging only
            print(f"Failed to setup file logging at {self.log_file_path}: {str(e)}")
            self._attach(logging.StreamHandler())
        self.logger.setLevel(self.level)

    def setup_logger(self):
        os.makedirs(os.path.dirname(self.log_file_path), exist_ok=True)
        self._attach(
            RotatingFileHandler(self.log_file_path, backupCount=5, maxBytes=1024 * 1024 * 10, encoding="utf-8"),
            logging.StreamHandler()
        )

    def _attach(self, *handlers):
        # Uvicorn --reload re-imports this module; avoid duplicate handlers
        if self.logger.handlers:
            return
        formatter = logging.Formatter(LOG_FORMAT)
        for handler in handlers:
            handler.setLevel(self.level)
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def log(self, level: int, message: str, extra: dict = None):
        """Simple wrapper to log messages"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)

    def exception(self, message: str):
        """ERROR with the active traceback attached"""
        self.logger.exception(message)

logs = LoggerConfig(
    level=settings.LOGGER,
    log_directory=settings.LOG_DIR,
    log_file="app.log"
)
