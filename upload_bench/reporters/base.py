"""Base progress reporter interface."""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from upload_bench.runner import SweepResult


class ProgressReporter(ABC):
    """Abstract base class for sweep progress reporters."""

    @abstractmethod
    def on_sweep_start(self, bucket: str, scenario_count: int) -> None:
        """Called once the bucket exists, before the first scenario."""
        pass

    @abstractmethod
    def on_scenario_start(self, name: str) -> None:
        """Called before a scenario's setup runs."""
        pass

    @abstractmethod
    def on_sample(self, name: str, count: int, last_ms: int) -> None:
        """Called after every recorded sample."""
        pass

    @abstractmethod
    def on_scenario_complete(self, name: str, count: int, mean_ms: Optional[float]) -> None:
        """Called when sampling for a scenario has finished."""
        pass

    @abstractmethod
    def on_cleanup(self, message: str) -> None:
        """Called for bucket cleanup milestones."""
        pass

    @abstractmethod
    def on_sweep_complete(self, result: "SweepResult") -> None:
        """Called after the bucket has been deleted."""
        pass

    def close(self) -> None:
        """Release any terminal state. Safe to call more than once."""
        pass
