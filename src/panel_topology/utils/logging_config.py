# File: src/panel_topology/utils/logging_config.py
"""
Logging configuration for the panel topology engine.

This module provides the logging setup shared by every pipeline stage,
including a custom TRACE level below DEBUG for per-segment diagnostics of
the merge and reconcile pipelines. Library modules only create module
loggers; configure() is for applications and scripts embedding the engine.
"""

import logging
import os
import sys
from datetime import datetime
from typing import Optional

# Custom level below DEBUG for per-segment and per-loop detail
TRACE_LEVEL = 5
logging.addLevelName(TRACE_LEVEL, "TRACE")


class PanelTopologyLogger:
    """
    Configures logging for the panel topology engine.

    Supports:
    - Standard levels (CRITICAL, ERROR, WARNING, INFO, DEBUG)
    - Custom TRACE level for loop-by-loop diagnostics
    - Console output with optional timestamped log file
    """

    TRACE_LEVEL = TRACE_LEVEL

    @staticmethod
    def _add_trace_method():
        """Add the TRACE method to the Logger class if not already present."""
        if not hasattr(logging.Logger, 'trace'):
            def trace(self, message, *args, **kwargs):
                """Log a message with level TRACE."""
                if self.isEnabledFor(TRACE_LEVEL):
                    self._log(TRACE_LEVEL, message, args, **kwargs)
            logging.Logger.trace = trace

    @staticmethod
    def configure(
        debug_mode: bool = False,
        log_dir: str = "logs",
        log_to_file: bool = False,
        trace: bool = False,
    ) -> Optional[str]:
        """
        Configure the logging system for an application using the engine.

        Args:
            debug_mode: If True, sets DEBUG level for all loggers
            log_dir: Directory to store log files
            log_to_file: If True, also write a timestamped log file
            trace: If True, enables the TRACE level (implies debug output)

        Returns:
            Path to the created log file, or None when logging to console only
        """
        PanelTopologyLogger._add_trace_method()

        if trace:
            level = TRACE_LEVEL
        elif debug_mode:
            level = logging.DEBUG
        else:
            level = logging.INFO

        root_logger = logging.getLogger()
        root_logger.setLevel(level)

        # Clear any existing handlers
        if root_logger.handlers:
            root_logger.handlers.clear()

        log_file = None
        if log_to_file:
            os.makedirs(log_dir, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = os.path.join(log_dir, f"panel_topology_{timestamp}.log")

            file_handler = logging.FileHandler(log_file)
            file_handler.setFormatter(
                logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
            )
            file_handler.setLevel(level)
            root_logger.addHandler(file_handler)

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s: %(message)s'))
        console_handler.setLevel(level if (debug_mode or trace) else logging.INFO)
        root_logger.addHandler(console_handler)

        return log_file

    @staticmethod
    def get_logger(name: str, level: Optional[int] = None):
        """
        Get a logger for a specific module.

        Args:
            name: Logger name, typically __name__
            level: Optional specific level for this logger

        Returns:
            A logger
        """
        logger = logging.getLogger(name)
        if level:
            logger.setLevel(level)
        return logger


# For direct import convenience
def get_logger(name: str, level: Optional[int] = None):
    """Delegates to PanelTopologyLogger.get_logger."""
    return PanelTopologyLogger.get_logger(name, level)
