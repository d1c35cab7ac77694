"""
Star history chart rendering.

Paints a timeline as a fixed-size PNG: a rounded black card with a title and
one filled line. Uses the matplotlib object API (Figure + Agg canvas) rather
than pyplot so concurrent renders in worker threads share no global figure
state.
"""

import io
import logging
import math
from collections.abc import Callable, Sequence
from datetime import date
from functools import lru_cache
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # backend offscreen

from matplotlib import font_manager  # noqa: E402
from matplotlib import path as mpath  # noqa: E402
from matplotlib.backends.backend_agg import FigureCanvasAgg  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402
from matplotlib.patches import FancyBboxPatch, PathPatch  # noqa: E402
from matplotlib.ticker import MaxNLocator  # noqa: E402
from matplotlib.transforms import IdentityTransform  # noqa: E402

from starchart.config import settings  # noqa: E402
from starchart.config.themes import ColorTheme, get_style  # noqa: E402
from starchart.core.exceptions import RenderFailure  # noqa: E402
from starchart.services.labels import plan_labels, y_tick_limit  # noqa: E402
from starchart.services.timeline import DailyPoint  # noqa: E402

logger = logging.getLogger(__name__)

WIDTH = 495  # px
HEIGHT = 195  # px
DPI = 100
CORNER_RADIUS = 15  # px
LINE_TENSION = 0.4

# Plot area inside the card, in figure fractions (left, bottom, width, height)
AXES_RECT = (0.11, 0.17, 0.86, 0.66)

TITLE_PREFIX = "Star History - "
Y_LABEL_COLOR = (1.0, 1.0, 1.0, 0.95)

# Glyphs missing from the chart fonts (the live marker) come from here
FALLBACK_FAMILY = "DejaVu Sans"

LabelPlanner = Callable[[Sequence[date]], list[str | None]]


def _pt(px: float) -> float:
    """Convert a pixel size to points at the chart DPI."""
    return px * 72 / DPI


@lru_cache(maxsize=8)
def _font_family(path: str) -> str:
    """
    Register a font file with matplotlib and return its family name.

    Falls back to the generic monospace family when the file is missing.
    """
    if not Path(path).is_file():
        logger.warning(f"Font file {path} not found, using monospace")
        return "monospace"
    font_manager.fontManager.addfont(path)
    return font_manager.FontProperties(fname=path).get_name()


def _font(path: str, size_px: float) -> font_manager.FontProperties:
    return font_manager.FontProperties(
        family=[_font_family(path), FALLBACK_FAMILY],
        size=_pt(size_px),
    )


def _control_points(
    points: Sequence[tuple[float, float]],
    scale: tuple[float, float],
    y_bounds: tuple[float, float],
) -> list[tuple[tuple[float, float], tuple[float, float]]]:
    """
    Bezier control points (incoming, outgoing) for each point of a smoothed line.

    Each point's tangent runs parallel to its neighbours' chord and is split in
    proportion to the on-screen distance to either neighbour, scaled by
    LINE_TENSION. `scale` converts data units to pixels; control points are
    clamped to `y_bounds` so the curve never dips below the axis.
    """
    sx, sy = scale
    lo, hi = y_bounds
    controls = []
    for i, (x, y) in enumerate(points):
        px, py = points[i - 1] if i > 0 else (x, y)
        nx, ny = points[i + 1] if i < len(points) - 1 else (x, y)
        d_prev = math.hypot((x - px) * sx, (y - py) * sy)
        d_next = math.hypot((nx - x) * sx, (ny - y) * sy)
        total = d_prev + d_next
        fa = LINE_TENSION * d_prev / total if total else 0.0
        fb = LINE_TENSION * d_next / total if total else 0.0
        dx, dy = nx - px, ny - py
        controls.append(
            (
                (x - fa * dx, min(max(y - fa * dy, lo), hi)),
                (x + fb * dx, min(max(y + fb * dy, lo), hi)),
            )
        )
    return controls


def smooth_line(
    points: Sequence[tuple[float, float]],
    scale: tuple[float, float],
    y_bounds: tuple[float, float],
) -> mpath.Path:
    """Cubic Bezier path through `points` (at least two), in data coordinates."""
    controls = _control_points(points, scale, y_bounds)
    vertices = [points[0]]
    codes = [mpath.Path.MOVETO]
    for i in range(1, len(points)):
        vertices += [controls[i - 1][1], controls[i][0], points[i]]
        codes += [mpath.Path.CURVE4] * 3
    return mpath.Path(vertices, codes)


def _area_under(line: mpath.Path, baseline: float) -> mpath.Path:
    """Close a smoothed line down to `baseline` for filling."""
    first_x = line.vertices[0][0]
    last_x = line.vertices[-1][0]
    vertices = [*line.vertices, (last_x, baseline), (first_x, baseline), (first_x, baseline)]
    codes = [*line.codes, mpath.Path.LINETO, mpath.Path.LINETO, mpath.Path.CLOSEPOLY]
    return mpath.Path(vertices, codes)


def _paint(
    timeline: Sequence[DailyPoint],
    full_name: str,
    theme: ColorTheme,
    label_planner: LabelPlanner,
) -> bytes:
    style = get_style(theme)
    bold = settings.font_bold_path
    regular = settings.font_regular_path

    fig = Figure(figsize=(WIDTH / DPI, HEIGHT / DPI), dpi=DPI)
    FigureCanvasAgg(fig)
    fig.patch.set_alpha(0.0)

    # Rounded black card behind everything, in pixel coordinates
    fig.add_artist(
        FancyBboxPatch(
            (0, 0),
            WIDTH,
            HEIGHT,
            boxstyle=f"round,pad=0,rounding_size={CORNER_RADIUS}",
            transform=IdentityTransform(),
            facecolor="black",
            edgecolor="none",
            zorder=-1,
        )
    )

    ax = fig.add_axes(AXES_RECT)
    ax.set_facecolor("none")
    for spine in ax.spines.values():
        spine.set_visible(False)

    n = len(timeline)
    points = [
        (float(i), float(p.cumulative_count))
        for i, p in enumerate(timeline)
        if p.cumulative_count is not None
    ]

    # Limits first: the smoothing works in on-screen distances
    x_lo, x_hi = (-0.5, 0.5) if n == 1 else (0.0, float(n - 1))
    top = max((y for _, y in points), default=0.0)
    y_hi = top * 1.05 if top else 1.0
    ax.set_xlim(x_lo, x_hi)
    ax.set_ylim(0, y_hi)

    if len(points) == 1:
        # A lone visible point would draw nothing without a marker
        ax.plot(*zip(*points), color=style.line, marker="o", markersize=_pt(6))
    elif points:
        scale = (
            WIDTH * AXES_RECT[2] / (x_hi - x_lo),
            HEIGHT * AXES_RECT[3] / y_hi,
        )
        line = smooth_line(points, scale, (0.0, y_hi))
        ax.add_patch(PathPatch(_area_under(line, 0.0), facecolor=style.area, edgecolor="none"))
        ax.add_patch(PathPatch(line, fill=False, edgecolor=style.line, linewidth=_pt(4)))

    ax.set_title(
        TITLE_PREFIX + full_name,
        color=style.title,
        fontproperties=_font(bold, 16),
        pad=4,
    )

    # X axis: one slot per day, text only where the planner says so
    labels = label_planner([p.date for p in timeline])
    ticks = [i for i, text in enumerate(labels) if text]
    ax.set_xticks(ticks, [labels[i] for i in ticks])
    ax.tick_params(axis="x", length=0, colors=style.xlabel, pad=2)
    x_font = _font(bold, 24)
    tick_labels = ax.get_xticklabels()
    for tick_label in tick_labels:
        tick_label.set_fontproperties(x_font)
    if len(tick_labels) > 1:
        # Keep the outer labels inside the card
        tick_labels[0].set_horizontalalignment("left")
        tick_labels[-1].set_horizontalalignment("right")

    # Y axis: starts at zero, a handful of integer ticks
    ax.yaxis.set_major_locator(MaxNLocator(nbins=y_tick_limit(n) - 1, integer=True))
    ax.tick_params(axis="y", length=0, colors=Y_LABEL_COLOR, pad=4)
    y_font = _font(regular, 18)
    for tick_label in ax.get_yticklabels():
        tick_label.set_fontproperties(y_font)

    buf = io.BytesIO()
    fig.savefig(buf, format="png", dpi=DPI, facecolor="none")
    return buf.getvalue()


def render_chart(
    timeline: Sequence[DailyPoint],
    full_name: str,
    theme: ColorTheme,
    label_planner: LabelPlanner = plan_labels,
) -> bytes:
    """
    Render a star history chart.

    Args:
        timeline: Daily series to plot (None values are not drawn)
        full_name: Repository "owner/name", shown in the title
        theme: Color theme
        label_planner: Maps the series dates to per-index x label text

    Returns:
        PNG bytes, WIDTH x HEIGHT pixels

    Raises:
        RenderFailure: If anything goes wrong while building or painting
    """
    try:
        return _paint(timeline, full_name, theme, label_planner)
    except Exception as e:
        logger.exception(f"Failed to render chart for {full_name}")
        raise RenderFailure(f"Unable to render chart for {full_name}") from e
