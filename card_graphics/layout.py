"""
Layout - Czysta geometria karty
- Dopasowanie obrazu (contain)
- Zaokrąglenia, ucinanie tekstu
- Pozycje w nagłówku i siatce technik
"""

from dataclasses import dataclass
from typing import List, Sequence

from .templates import CardLayout, DEFAULT_LAYOUT


@dataclass(frozen=True)
class FitResult:
    """Wynik dopasowania obrazu do ramki"""
    width: float
    height: float
    offset_x: float
    offset_y: float

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


DEGENERATE_FIT = FitResult(0, 0, 0, 0)


def fit_contain(src_w: float, src_h: float, dst_w: float, dst_h: float) -> FitResult:
    """
    Skaluje obraz tak, żeby zmieścił się cały w ramce z zachowaniem proporcji
    i wyśrodkowaniem. Zerowe lub ujemne wymiary dają wynik zdegenerowany.
    """
    if src_w <= 0 or src_h <= 0 or dst_w <= 0 or dst_h <= 0:
        return DEGENERATE_FIT

    ratio = min(dst_w / src_w, dst_h / src_h)
    width = src_w * ratio
    height = src_h * ratio
    return FitResult(
        width=width,
        height=height,
        offset_x=(dst_w - width) / 2,
        offset_y=(dst_h - height) / 2
    )


def clamp_radius(width: float, height: float, radius: float) -> float:
    """Promień nie większy niż połowa krótszego boku"""
    limit = min(width, height) / 2
    return max(0, min(radius, limit))


def truncate(text: str, cap: int) -> str:
    """Twarde ucięcie do `cap` znaków"""
    return (text or "")[:max(0, cap)]


def truncate_code_units(text: str, cap: int) -> str:
    """
    Ucięcie do `cap` jednostek UTF-16 (jak długość tekstu w przeglądarce).
    Znak spoza BMP zajmuje dwie jednostki; rozcięta para surogatów jest pomijana.
    """
    encoded = (text or "").encode("utf-16-le", "surrogatepass")
    return encoded[:max(0, cap) * 2].decode("utf-16-le", "ignore")


@dataclass(frozen=True)
class HeaderAnchors:
    """Punkty zaczepienia tekstów w nagłówku"""
    title_x: float
    username_right_x: float
    first_line_y: float
    monster_x: float
    monster_y: float
    reserved_right: float
    has_race_tag: bool
    race_tag_box: tuple = ()
    race_text_center: tuple = ()


def header_anchors(race_text: str, layout: CardLayout = DEFAULT_LAYOUT) -> HeaderAnchors:
    """Liczy pozycje tekstów nagłówka, rezerwując miejsce na tag rasy"""
    has_tag = bool(race_text)
    reserved = 0
    tag_box = ()
    tag_center = ()

    if has_tag:
        tag_w = layout.race_tag_width
        tag_h = layout.header_height - layout.race_tag_inset * 2
        tag_x = layout.canvas_width - tag_w - layout.race_tag_margin_right
        tag_y = layout.header_y + layout.race_tag_inset
        reserved = tag_w + layout.race_tag_margin_right + layout.race_tag_gap
        tag_box = (tag_x, tag_y, tag_w, tag_h)
        tag_center = (
            layout.canvas_width - tag_w / 2 - layout.race_tag_margin_right,
            layout.header_y + layout.header_height / 2
        )

    return HeaderAnchors(
        title_x=layout.header_x + layout.header_text_inset,
        username_right_x=(
            layout.header_x + layout.header_width - layout.header_text_inset - reserved
        ),
        first_line_y=layout.header_y + layout.header_first_line_offset,
        monster_x=layout.header_x + layout.header_width / 2,
        monster_y=(
            layout.header_y + layout.header_height / 2 + layout.header_second_line_offset
        ),
        reserved_right=reserved,
        has_race_tag=has_tag,
        race_tag_box=tag_box,
        race_text_center=tag_center
    )


@dataclass(frozen=True)
class GridCell:
    """Komórka siatki technik"""
    index: int
    column: int
    row: int
    x: float
    y: float
    width: float
    height: float


def technique_cells(class_count: int, layout: CardLayout = DEFAULT_LAYOUT) -> List[GridCell]:
    """
    Komórki siatki: `class_count` kolumn x 6 wierszy.
    Indeks techniki = kolumna * 6 + wiersz (kolejność kolumnowa).
    """
    cols = max(1, class_count)
    rows = layout.grid_rows
    cell_w = layout.grid_width / cols
    cell_h = layout.grid_height / rows

    cells = []
    for c in range(cols):
        for r in range(rows):
            cells.append(GridCell(
                index=c * rows + r,
                column=c,
                row=r,
                x=layout.grid_x + c * cell_w,
                y=layout.grid_y + r * cell_h,
                width=cell_w,
                height=cell_h
            ))
    return cells


def technique_at(techniques: Sequence[str], index: int) -> str:
    """Technika spod indeksu albo pusty tekst poza zakresem"""
    if 0 <= index < len(techniques):
        return techniques[index] or ""
    return ""
