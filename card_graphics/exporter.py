"""
Exporter - Zapis karty do PNG
"""

import logging
import re
from pathlib import Path
from typing import Optional

from .card_renderer import RenderSurface

logger = logging.getLogger(__name__)

FALLBACK_NAME = "card"
_UNSAFE_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]')


def export_filename(title: str, extension: str = "png") -> str:
    """Nazwa pliku z tytułu karty; 'card.png' gdy tytuł pusty"""
    name = _UNSAFE_CHARS.sub("_", (title or "").strip()).strip(". ")
    return f"{name or FALLBACK_NAME}.{extension}"


def _log_if_blank(surface: RenderSurface):
    if surface.render_count == 0:
        logger.info("Eksport przed pierwszym renderowaniem - pusta karta")


def export_png(surface: RenderSurface) -> bytes:
    """PNG z aktualnej zawartości powierzchni (pusta, jeśli nic nie narysowano)"""
    _log_if_blank(surface)
    return surface.to_bytes("PNG")


def save_png(surface: RenderSurface, title: str, output_dir: Optional[Path] = None) -> Path:
    """Zapisuje kartę jako <tytuł>.png w katalogu wyjściowym"""
    output_dir = Path(output_dir or ".")
    output_dir.mkdir(parents=True, exist_ok=True)
    filepath = output_dir / export_filename(title)
    _log_if_blank(surface)
    surface.save(filepath, "PNG")
    logger.info(f"Karta zapisana: {filepath}")
    return filepath
