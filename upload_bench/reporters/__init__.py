"""Progress reporters for sweep output."""

from .base import ProgressReporter
from .console import ConsoleProgress

__all__ = ["ProgressReporter", "ConsoleProgress"]
