"""
Monster Card Generator - Card State Module
"""
from .card_input import CardInput, DEFAULT_RACES, resolve_race
from .image_loader import ImageLoader, IllustrationSource, make_checker_image
from .session import CardSession

__version__ = "1.0.0"
