"""Logging helpers."""

from .logger import HumanLogger, configure_logging
from .report import generate_benchmark_report, generate_history_report

__all__ = [
    "HumanLogger",
    "configure_logging",
    "generate_benchmark_report",
    "generate_history_report",
]
