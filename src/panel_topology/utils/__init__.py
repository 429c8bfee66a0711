# File: src/panel_topology/utils/__init__.py
"""Utilities for the panel topology engine."""

from .logging_config import TRACE_LEVEL, PanelTopologyLogger, get_logger

__all__ = ["TRACE_LEVEL", "PanelTopologyLogger", "get_logger"]
