"""Base utility class providing logging and shared helpers for all upload modules."""

import json
import logging
from typing import Any

from .errors import OutputWriteFailedError


class BaseUtils:
    """Base class for all utility modules in the KBSeqUpload package.

    Provides logging and JSON output shared by the converter, Shock,
    handle service and library utilities.
    """

    def __init__(self, name="Unknown", log_level: str = "INFO", **kwargs: Any) -> None:
        """Initialize the base utility class."""
        self.logger = self._setup_logger(log_level)

        # Allow subclasses to pass additional initialization parameters
        for key, value in kwargs.items():
            setattr(self, key, value)

        self.name = name

    def _setup_logger(self, log_level: str) -> logging.Logger:
        """Set up logging for the utility module."""
        logger = logging.getLogger(
            f"{self.__class__.__module__}.{self.__class__.__name__}"
        )
        logger.setLevel(getattr(logging, log_level.upper()))
        logger.propagate = False

        # Only add handler if none exists to prevent duplicate logs
        if not logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
            )
            handler.setFormatter(formatter)
            logger.addHandler(handler)

        return logger

    def log_info(self, message: str) -> None:
        """Log an info message."""
        self.logger.info(message)

    def log_warning(self, message: str) -> None:
        """Log a warning message."""
        self.logger.warning(message)

    def log_error(self, message: str) -> None:
        """Log an error message."""
        self.logger.error(message)

    def log_debug(self, message: str) -> None:
        """Log a debug message."""
        self.logger.debug(message)

    def save_json(self, filename: str, data: Any) -> str:
        """Write data as JSON to filename and return the path written."""
        try:
            with open(filename, "w") as f:
                json.dump(data, f)
        except OSError as e:
            self.log_error(f"Could not open {filename}: {e}")
            raise OutputWriteFailedError(f"Could not open {filename}: {e}") from e
        self.log_info(f"Wrote {filename}")
        return filename
