# Services package

from starchart.services.labels import LIVE_MARKER, plan_labels, y_tick_limit
from starchart.services.renderer import render_chart
from starchart.services.star_chart import StarChartService
from starchart.services.timeline import DailyPoint, Timeline, build_timeline, mask_leading_zeros

__all__ = [
    # Pipeline
    "StarChartService",
    # Timeline
    "DailyPoint",
    "Timeline",
    "build_timeline",
    "mask_leading_zeros",
    # Labels
    "LIVE_MARKER",
    "plan_labels",
    "y_tick_limit",
    # Rendering
    "render_chart",
]
