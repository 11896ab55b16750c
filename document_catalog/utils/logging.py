"""Structured logging for the document catalog"""

import logging
import json
from datetime import datetime, timezone
from typing import Dict, Any, Optional
from pathlib import Path

AGENT_NAME = "document_catalog"


class StructuredLogger:
    """Structured logger for the document catalog"""

    def __init__(self, name: str = AGENT_NAME):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.INFO)

        if not self.logger.handlers:
            self._configure_console()

    def _formatter(self) -> logging.Formatter:
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    def _configure_console(self) -> None:
        """Attach the console handler."""
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(self._formatter())
        self.logger.addHandler(console_handler)
        self.logger.propagate = False

    def configure(self, level: str = "INFO", log_dir: Optional[Path] = None) -> None:
        """Apply the configured level and add info/error file handlers when a log directory is given."""
        self.logger.setLevel(getattr(logging, level.upper(), logging.INFO))
        if log_dir is None:
            return

        if any(isinstance(handler, logging.FileHandler) for handler in self.logger.handlers):
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        formatter = self._formatter()

        info_handler = logging.FileHandler(log_dir / "document_catalog.log", encoding="utf-8")
        info_handler.setLevel(logging.INFO)
        info_handler.setFormatter(formatter)

        error_handler = logging.FileHandler(log_dir / "document_catalog_error.log", encoding="utf-8")
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)

        self.logger.addHandler(info_handler)
        self.logger.addHandler(error_handler)

    def _payload(self, key: str, value: str, data: Optional[Dict[str, Any]]) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            key: value,
            "agent": AGENT_NAME
        }
        if data:
            log_data.update(data)
        return json.dumps(log_data, default=str)

    def log_step(self, step: str, data: Dict[str, Any] = None):
        """Log a processing step"""
        self.logger.info(f"STEP: {self._payload('step', step, data)}")

    def log_warning(self, warning_type: str, data: Dict[str, Any] = None):
        """Log a non-fatal condition"""
        self.logger.warning(f"WARNING: {self._payload('warning', warning_type, data)}")

    def log_error(self, error_type: str, data: Dict[str, Any] = None):
        """Log an error"""
        self.logger.error(f"ERROR: {self._payload('error', error_type, data)}")


# Global logger instance
logger = StructuredLogger()
