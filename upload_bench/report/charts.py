"""Chart rendering for reports (matplotlib, headless).

Both chart types use a logarithmic time axis. Missing values (None) are
left out of the plot: lines span the gap, bars are simply not drawn.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Union

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import numpy as np  # noqa: E402

FIGURE_SIZE = (8, 6)
DPI = 100
Y_LABEL = "Upload time (ms, lower is better)"
X_LABEL = "File size"


@dataclass
class Series:
    """One line of a line chart."""

    label: str
    values: list[Optional[float]]
    color: str
    linewidth: float = 1.5


@dataclass
class StackedBars:
    """Two stacked phases per x position, for one chunk size."""

    label: str
    lower: list[Optional[float]]
    upper: list[Optional[float]]
    color: str
    lower_name: str = "upload time"
    upper_name: str = "reconcile time"


def _present(values: Sequence[Optional[float]]) -> list[tuple[int, float]]:
    # log axis: non-positive values cannot be drawn either
    return [(i, v) for i, v in enumerate(values) if v is not None and v > 0]


def render_line_chart(
    series: Sequence[Series],
    labels: Sequence[str],
    title: str,
    path: Union[str, Path],
) -> Path:
    """Render series as lines over the size labels and save to ``path``.

    Returns:
        The written file path.
    """
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)

    for s in series:
        points = _present(s.values)
        ax.plot(
            [i for i, _ in points],
            [v for _, v in points],
            label=s.label,
            color=s.color,
            linewidth=s.linewidth,
            marker="o",
            markersize=3,
        )

    ax.set_yscale("log")
    ax.set_xticks(range(len(labels)))
    ax.set_xticklabels(labels)
    ax.set_xlabel(X_LABEL)
    ax.set_ylabel(Y_LABEL)
    ax.set_title(title)
    ax.legend(fontsize=9)
    ax.grid(axis="y", alpha=0.3, linestyle="--")

    return _save(fig, path)


def render_stacked_bar_chart(
    stacks: Sequence[StackedBars],
    labels: Sequence[str],
    title: str,
    path: Union[str, Path],
) -> Path:
    """Render grouped, two-phase stacked bars and save to ``path``.

    Each stack gets its own bar within a size group; the lower phase is
    filled, the upper phase is outlined in the same color.

    Returns:
        The written file path.
    """
    fig, ax = plt.subplots(figsize=FIGURE_SIZE)
    ax.set_yscale("log", nonpositive="clip")

    x = np.arange(len(labels))
    width = 0.8 / max(len(stacks), 1)

    for index, stack in enumerate(stacks):
        offset = width * (index - len(stacks) / 2 + 0.5)

        lower = dict(_present(stack.lower))
        positions = sorted(lower)
        ax.bar(
            [x[i] + offset for i in positions],
            [lower[i] for i in positions],
            width,
            label=f"{stack.label} {stack.lower_name}",
            color=stack.color,
        )

        upper = {i: v for i, v in _present(stack.upper) if i in lower}
        upper_positions = sorted(upper)
        ax.bar(
            [x[i] + offset for i in upper_positions],
            [upper[i] for i in upper_positions],
            width,
            bottom=[lower[i] for i in upper_positions],
            label=f"{stack.label} {stack.upper_name}",
            color="white",
            edgecolor=stack.color,
            linewidth=1.5,
        )

    ax.set_xticks(x)
    ax.set_xticklabels(labels)
    ax.set_xlabel(X_LABEL)
    ax.set_ylabel(Y_LABEL)
    ax.set_title(title)
    ax.legend(fontsize=7, ncol=2)
    ax.grid(axis="y", alpha=0.3, linestyle="--")

    return _save(fig, path)


def _save(fig, path: Union[str, Path]) -> Path:
    path = Path(path)
    try:
        fig.tight_layout()
        fig.savefig(path, dpi=DPI)
    finally:
        plt.close(fig)
    return path
