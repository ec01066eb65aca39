import logging
from places_ui.config import settings

class LoggerConfig:
    """
    Console logger for the web client.
    Gateway failures are logged here and shown to the user only as generic text.
    """
    def __init__(self, env=20, logger_name="NearbyPlacesUI"):
        self.logger_name = logger_name
        self.env = env
        self.log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        self.logger = logging.getLogger(self.logger_name)
        self.setup_logger()

    def setup_logger(self):
        console_handler = logging.StreamHandler()
        console_handler.setLevel(self.env)
        console_handler.setFormatter(logging.Formatter(self.log_format))

        # Streamlit re-imports on every rerun; keep a single handler
        if not self.logger.hasHandlers():
            self.logger.addHandler(console_handler)

        self.logger.setLevel(self.env)

    def log(self, level: int, message: str, extra: dict = None):
        """Simple wrapper to log messages"""
        if extra:
            message = f"{message} | {extra}"
        self.logger.log(level, message)

logs = LoggerConfig(env=settings.LOGGER, logger_name="NEARBY-FE")
