import logging
import os
from datetime import datetime
from logging import WARNING, FileHandler
from logging.handlers import TimedRotatingFileHandler

MASK = "[MASKED]"


class SecretMaskingFilter(logging.Filter):
    """Replaces every registered secret in a record's message and args with ``[MASKED]``."""

    def __init__(self, name: str = ""):
        super().__init__(name)
        self._secrets = set()
        self._ordered = []

    def add_secret(self, value):
        # very short values would mask unrelated text
        if isinstance(value, str) and len(value.strip()) >= 4:
            self._secrets.add(value.strip())
            self._ordered = sorted(self._secrets, key=len, reverse=True)

    @property
    def secret_count(self) -> int:
        return len(self._secrets)

    def mask(self, text: str) -> str:
        for secret in self._ordered:
            text = text.replace(secret, MASK)
        return text

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        if record.msg:
            record.msg = self.mask(str(record.msg))
        if record.args:
            if isinstance(record.args, dict):
                record.args = {k: self.mask(v) if isinstance(v, str) else v for k, v in record.args.items()}
            else:
                record.args = tuple(self.mask(a) if isinstance(a, str) else a for a in record.args)
        return True


class GetLog:
    logger = None
    log_folder = None
    masking_filter = SecretMaskingFilter()

    @classmethod
    def get_log(cls, shared_log_folder=None, level=logging.INFO, to_file=True):
        """Get the root logger, configuring it on first use.

        Args:
            shared_log_folder (str): Log folder to reuse instead of a new timestamped one
            level (int): Level for the logger and the console handler
            to_file (bool): Whether to write log.log / error.log in the log folder
        """
        if cls.logger is None:
            cls.logger = logging.getLogger()
            cls.logger.setLevel(level)

            fmt = "%(asctime)s %(levelname)s [%(name)s] [%(filename)s (%(funcName)s:%(lineno)d)] - %(message)s"
            fm = logging.Formatter(fmt)

            if to_file:
                if shared_log_folder:
                    cls.log_folder = shared_log_folder
                else:
                    current_time = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")
                    cls.log_folder = os.path.join("./logs", current_time)
                    os.environ["WEBQA_FLOWS_TIMESTAMP"] = current_time

                os.makedirs(cls.log_folder, exist_ok=True)

                th = TimedRotatingFileHandler(
                    filename=os.path.join(cls.log_folder, "log.log"),
                    when="midnight",
                    interval=1,
                    backupCount=3,
                    encoding="utf-8",
                )
                th.setLevel(level)
                th.setFormatter(fm)
                cls._attach(th)

                error_handler = FileHandler(filename=os.path.join(cls.log_folder, "error.log"), encoding="utf-8")
                error_handler.setLevel(WARNING)
                error_handler.setFormatter(fm)
                cls._attach(error_handler)

            console_handler = logging.StreamHandler()
            console_handler.setLevel(level)
            console_handler.setFormatter(fm)
            cls._attach(console_handler)

        return cls.logger

    @classmethod
    def _attach(cls, handler):
        handler.addFilter(cls.masking_filter)
        cls.logger.addHandler(handler)

    @classmethod
    def register_secret(cls, value):
        """Mask ``value`` in every message emitted through GetLog handlers."""
        cls.masking_filter.add_secret(value)
