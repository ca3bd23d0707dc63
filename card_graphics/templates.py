"""
Frame Templates - Style ramek i stałe layoutu karty
- Definicje palet dla stylów ramek
- Geometria sekcji karty
- Typografia i limity znaków
"""

from dataclasses import dataclass
from typing import List, Tuple, Dict
from enum import Enum


class FrameStyle(Enum):
    """Style ramek karty"""
    NEO = "neo"
    CLASSIC = "classic"
    DARK = "dark"
    HOLO = "holo"


# Przystanek gradientu: (offset 0-1, kolor hex)
GradientStop = Tuple[float, str]


@dataclass(frozen=True)
class FramePalette:
    """Paleta ramki"""
    name: str
    background_stops: Tuple[GradientStop, ...]   # Tło całej karty (pionowo)
    panel_fill: str                               # Wewnętrzny panel
    border_stops: Tuple[GradientStop, ...]       # Metaliczna obwódka (pionowo)


# === PALETY RAMEK ===

FRAME_PALETTES: Dict[FrameStyle, FramePalette] = {
    FrameStyle.NEO: FramePalette(
        name="Neo",
        background_stops=((0.0, "#0f172a"), (1.0, "#020617")),
        panel_fill="#1f2937",
        border_stops=((0.0, "#67e8f9"), (1.0, "#0ea5e9")),
    ),

    FrameStyle.CLASSIC: FramePalette(
        name="Classic",
        background_stops=((0.0, "#3b2f2f"), (1.0, "#1f1b16")),
        panel_fill="#9a6b3d",
        border_stops=((0.0, "#ffe1ad"), (1.0, "#8b5a2b")),
    ),

    FrameStyle.DARK: FramePalette(
        name="Dark",
        background_stops=((0.0, "#111827"), (1.0, "#000000")),
        panel_fill="#2f2f2f",
        border_stops=((0.0, "#9ca3af"), (1.0, "#111827")),
    ),

    FrameStyle.HOLO: FramePalette(
        name="Holo",
        background_stops=((0.0, "#0c1027"), (1.0, "#1a365d")),
        panel_fill="#1f2937",
        border_stops=((0.0, "#a78bfa"), (1.0, "#22d3ee")),
    ),
}


@dataclass(frozen=True)
class TypographyStyle:
    """Rozmiary fontów poszczególnych elementów"""
    header_line_size: int = 22      # Tytuł + nazwa gracza (bold)
    monster_name_size: int = 40     # Nazwa potwora (bold)
    race_tag_size: int = 24         # Tekst w tagu rasy (bold)
    caption_size: int = 24          # Podpis "Illustration"
    label_size: int = 20            # EX / Battle Meme
    technique_size: int = 16        # Komórki siatki technik


@dataclass(frozen=True)
class CardLayout:
    """Geometria karty (jednostki logiczne = piksele)"""
    canvas_width: int = 720
    canvas_height: int = 1136

    # Ramka
    frame_padding: int = 18
    frame_radius: int = 28
    border_inset: int = 6
    border_width: int = 8

    # Ilustracja
    illustration_padding: int = 48
    illustration_y: int = 180
    illustration_height: int = 580
    illustration_radius: int = 24
    illustration_alpha: float = 0.45

    # Nagłówek
    header_x: int = 32
    header_y: int = 64
    header_height: int = 132
    header_radius: int = 16
    header_text_inset: int = 16
    header_first_line_offset: int = 34
    header_second_line_offset: int = 22

    # Tag rasy
    race_tag_width: int = 64
    race_tag_margin_right: int = 40
    race_tag_gap: int = 8
    race_tag_inset: int = 8
    race_tag_radius: int = 8

    # Etykiety pod ilustracją
    labels_x: int = 48
    labels_offset: int = 36
    labels_line_height: int = 26

    # Siatka technik
    grid_x: int = 48
    grid_height: int = 240
    grid_bottom_margin: int = 64
    grid_panel_inflate: int = 8
    grid_panel_radius: int = 12
    grid_panel_alpha: float = 0.9
    grid_rows: int = 6
    grid_text_inset: int = 8

    @property
    def size(self) -> Tuple[int, int]:
        return (self.canvas_width, self.canvas_height)

    @property
    def illustration_width(self) -> int:
        return self.canvas_width - self.illustration_padding * 2

    @property
    def header_width(self) -> int:
        return self.canvas_width - self.header_x * 2

    @property
    def grid_width(self) -> int:
        return self.canvas_width - self.grid_x * 2

    @property
    def grid_y(self) -> int:
        return self.canvas_height - self.grid_height - self.grid_bottom_margin


@dataclass(frozen=True)
class CardColors:
    """Stałe kolory niezależne od ramki"""
    header_stops: Tuple[GradientStop, ...] = ((0.0, "#111827"), (1.0, "#0b1220"))
    text_primary: str = "#e5e7eb"
    caption: str = "#cbd5e1"
    race_tag_fill: str = "#ef4444"
    race_tag_text: str = "#ffffff"
    grid_panel: str = "#1f2937"
    grid_line: str = "#475569"
    illustration_panel: str = "#000000"


# Limity znaków (twarde ucięcie, bez wielokropka)
TEXT_CAPS: Dict[str, int] = {
    "race": 6,
    "technique": 18,
    "title": 20,
    "username": 16,
    "monster_name": 18,
    "label": 48,
}

DEFAULT_LAYOUT = CardLayout()
DEFAULT_TYPOGRAPHY = TypographyStyle()
DEFAULT_COLORS = CardColors()


# === HELPER FUNCTIONS ===

def resolve_frame(style: FrameStyle) -> FramePalette:
    """Zwraca paletę dla stylu ramki"""
    return FRAME_PALETTES[style]


def parse_frame_style(name: str) -> FrameStyle:
    """Parsuje nazwę stylu (ValueError dla nieznanych)"""
    return FrameStyle(name.strip().lower())


def list_frame_styles() -> List[str]:
    """Lista dostępnych stylów ramek"""
    return [style.value for style in FrameStyle]


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Konwertuje hex na RGB"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def hex_to_rgba(hex_color: str, alpha: float = 1.0) -> Tuple[int, int, int, int]:
    """Konwertuje hex + krycie (0-1) na RGBA"""
    r, g, b = hex_to_rgb(hex_color)
    return (r, g, b, int(round(255 * alpha)))


def interpolate_stops(stops: Tuple[GradientStop, ...], t: float) -> Tuple[int, int, int]:
    """Kolor gradientu w punkcie t (0-1)"""
    t = max(0.0, min(1.0, t))
    if t <= stops[0][0]:
        return hex_to_rgb(stops[0][1])
    for (start, c1), (end, c2) in zip(stops, stops[1:]):
        if t <= end:
            span = end - start
            ratio = (t - start) / span if span > 0 else 1.0
            r1, g1, b1 = hex_to_rgb(c1)
            r2, g2, b2 = hex_to_rgb(c2)
            return (
                int(r1 + (r2 - r1) * ratio),
                int(g1 + (g2 - g1) * ratio),
                int(b1 + (b2 - b1) * ratio),
            )
    return hex_to_rgb(stops[-1][1])
