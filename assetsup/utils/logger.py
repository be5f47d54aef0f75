import logging
import json
import os
from pathlib import Path
import threading


ROOT_LOGGER_NAME = "assetsup"

LOG_FIELDS = {
    "timestamp": "asctime",
    "level": "levelname",
    "logger": "name",
    "module": "module",
    "function": "funcName",
    "line": "lineno",
    "message": "message",
}


class SingletonLogger:
    """
    Owns the handlers of the "assetsup" logger.

    Handlers are attached on first use only; module loggers are plain
    children ("assetsup.stellar", "assetsup.auth", ...) that propagate to it.
    """
    _lock = threading.Lock()
    _root = None

    @classmethod
    def get_logger(cls, name: str = ROOT_LOGGER_NAME) -> logging.Logger:
        if cls._root is None:
            with cls._lock:
                if cls._root is None:
                    cls._root = cls._configure(Path(os.environ.get("LOG_DIR", "logs")))
        if name.startswith(ROOT_LOGGER_NAME + "."):
            return logging.getLogger(name)
        return cls._root

    @staticmethod
    def _configure(logs_dir: Path) -> logging.Logger:
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.setLevel(logging.DEBUG)
        root.propagate = False
        root.handlers.clear()

        formatter = JsonFormatter(LOG_FIELDS)
        logs_dir.mkdir(parents=True, exist_ok=True)

        # (handler, level) pairs; log files are truncated per process
        handlers = (
            (logging.FileHandler(logs_dir / "assetsup.log", mode='w', encoding='utf-8'), logging.INFO),
            (logging.FileHandler(logs_dir / "errors.log", mode='w', encoding='utf-8'), logging.ERROR),
            (logging.StreamHandler(), logging.DEBUG),
        )
        for handler, level in handlers:
            handler.setLevel(level)
            handler.setFormatter(formatter)
            root.addHandler(handler)

        return root


class JsonFormatter(logging.Formatter):
    """
    One JSON object per record.

    fmt_dict maps output keys to LogRecord attribute names.
    """
    def __init__(self, fmt_dict: dict = None, time_format: str = "%Y-%m-%dT%H:%M:%S", msec_format: str = "%s.%03dZ"):
        super().__init__()
        self.fmt_dict = fmt_dict if fmt_dict is not None else {"message": "message"}
        self.default_time_format = time_format
        self.default_msec_format = msec_format
        self.datefmt = None

    def usesTime(self) -> bool:
        return "asctime" in self.fmt_dict.values()

    def format(self, record) -> str:
        record.message = record.getMessage()
        if self.usesTime():
            record.asctime = self.formatTime(record, self.datefmt)

        entry = {key: getattr(record, attr) for key, attr in self.fmt_dict.items()}

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            entry["exc_info"] = record.exc_text
        if record.stack_info:
            entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def get_logger(name: str = ROOT_LOGGER_NAME) -> logging.Logger:
    """Logger for a module, e.g. get_logger("assetsup.stellar")"""
    return SingletonLogger.get_logger(name)
