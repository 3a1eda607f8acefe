"""Chart rendering."""

from dow_valuation.ui.animation import build_figure, build_frames, export_animation

__all__ = ["build_figure", "build_frames", "export_animation"]
