"""
Monster Card Generator - Graphics Module
"""
from .templates import FrameStyle, FramePalette, resolve_frame
from .layout import fit_contain, FitResult
from .card_renderer import CardRenderer, RenderSurface, render_card, round_rect
from .exporter import export_filename, export_png, save_png

__version__ = "1.0.0"
