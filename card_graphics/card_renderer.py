"""
Card Renderer - Silnik rysujący kartę potwora
- Pełne przerysowanie powierzchni przy każdym przebiegu
- Sekcje w stałej kolejności: ramka, ilustracja, nagłówek, etykiety, techniki
- Deterministyczny wynik dla tego samego snapshotu
"""

import io
import os
import logging
from pathlib import Path
from typing import Optional, List, Tuple, Union, TYPE_CHECKING

from PIL import Image, ImageDraw, ImageFont

from .templates import (
    CardLayout,
    CardColors,
    TypographyStyle,
    GradientStop,
    DEFAULT_LAYOUT,
    DEFAULT_COLORS,
    DEFAULT_TYPOGRAPHY,
    TEXT_CAPS,
    resolve_frame,
    hex_to_rgba,
    interpolate_stops
)
from .layout import (
    clamp_radius,
    fit_contain,
    header_anchors,
    technique_at,
    technique_cells,
    truncate,
    truncate_code_units
)

if TYPE_CHECKING:
    from card_state.card_input import CardInput

logger = logging.getLogger(__name__)

FONTS_DIR = Path(os.environ.get("CARD_FONTS_DIR", Path(__file__).parent.parent / "fonts"))

PLACEHOLDER_CAPTION = "Illustration"


class RenderSurface:
    """Powierzchnia rysowania 720x1136 (RGBA)"""

    def __init__(self, layout: CardLayout = DEFAULT_LAYOUT):
        self.layout = layout
        self.image = Image.new('RGBA', layout.size, (0, 0, 0, 0))
        self.render_count = 0

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    def clear(self):
        self.image.paste((0, 0, 0, 0), (0, 0, self.width, self.height))

    def save(self, path: Union[str, Path], format: str = "PNG"):
        self.image.save(path, format=format)

    def to_bytes(self, format: str = "PNG") -> bytes:
        buffer = io.BytesIO()
        self.image.save(buffer, format=format)
        return buffer.getvalue()


class FontManager:
    """Zarządza fontami z fallbackami (z obsługą znaków CJK)"""

    SYSTEM_FONTS_BOLD = [
        "NotoSansCJK-Bold.ttc", "NotoSansJP-Bold.ttf",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Bold.ttc",
        "/System/Library/Fonts/ヒラギノ角ゴシック W6.ttc",
        "meiryob.ttc", "YuGothB.ttc",
        "arialbd.ttf", "DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"
    ]

    SYSTEM_FONTS_REGULAR = [
        "NotoSansCJK-Regular.ttc", "NotoSansJP-Regular.ttf",
        "/usr/share/fonts/opentype/noto/NotoSansCJK-Regular.ttc",
        "/System/Library/Fonts/ヒラギノ角ゴシック W3.ttc",
        "meiryo.ttc", "YuGothM.ttc",
        "arial.ttf", "DejaVuSans.ttf",
        "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"
    ]

    def __init__(self):
        self.fonts_cache = {}

    def get_font(self, size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
        cache_key = f"{'bold' if bold else 'regular'}_{size}"
        if cache_key in self.fonts_cache:
            return self.fonts_cache[cache_key]
        font = self._load_font(size, bold)
        self.fonts_cache[cache_key] = font
        return font

    def _candidates(self, bold: bool) -> List[str]:
        candidates = []

        # Font wskazany w konfiguracji
        env_path = os.environ.get("CARD_FONT_BOLD_PATH" if bold else "CARD_FONT_PATH")
        if env_path:
            candidates.append(env_path)

        # Lokalne fonty
        local_names = ["NotoSansJP-Bold.ttf", "Inter-Bold.ttf"] if bold else ["NotoSansJP-Regular.ttf", "Inter-Regular.ttf"]
        for name in local_names:
            font_path = FONTS_DIR / name
            if font_path.exists():
                candidates.append(str(font_path))

        candidates.extend(self.SYSTEM_FONTS_BOLD if bold else self.SYSTEM_FONTS_REGULAR)
        return candidates

    def _load_font(self, size: int, bold: bool = False) -> ImageFont.FreeTypeFont:
        for font_name in self._candidates(bold):
            try:
                return ImageFont.truetype(font_name, size)
            except OSError:
                continue

        logger.warning(f"Brak fontu systemowego ({'bold' if bold else 'regular'}), używam domyślnego")
        return ImageFont.load_default(size=size)


def round_rect(
    draw: ImageDraw.ImageDraw,
    x: float,
    y: float,
    w: float,
    h: float,
    radius: float,
    fill=None,
    outline=None,
    width: int = 1
) -> float:
    """
    Zaokrąglony prostokąt - podstawowy kształt wszystkich sekcji.
    Promień jest przycinany do min(w, h) / 2; zwraca użyty promień.
    """
    r = clamp_radius(w, h, radius)
    if w <= 0 or h <= 0:
        return r
    draw.rounded_rectangle(
        [x, y, x + w, y + h],
        radius=r,
        fill=fill,
        outline=outline,
        width=width
    )
    return r


class CardRenderer:
    """
    Renderer karty. `render` za każdym razem rysuje całą powierzchnię od nowa.
    """

    def __init__(
        self,
        layout: CardLayout = DEFAULT_LAYOUT,
        typography: TypographyStyle = DEFAULT_TYPOGRAPHY,
        colors: CardColors = DEFAULT_COLORS,
        font_manager: Optional[FontManager] = None
    ):
        self.layout = layout
        self.typography = typography
        self.colors = colors
        self.font_manager = font_manager or FontManager()

    def _create_gradient(
        self,
        width: int,
        height: int,
        stops: Tuple[GradientStop, ...],
        start_y: float = 0,
        end_y: Optional[float] = None
    ) -> Image.Image:
        """Tworzy pionowy gradient między start_y i end_y (względem obrazu)"""
        base = Image.new('RGBA', (width, height))
        draw = ImageDraw.Draw(base)

        if end_y is None:
            end_y = height
        span = end_y - start_y

        for y in range(height):
            ratio = (y + 0.5 - start_y) / span if span > 0 else 0.0
            r, g, b = interpolate_stops(stops, ratio)
            draw.line([(0, y), (width, y)], fill=(r, g, b, 255))

        return base

    def _rounded_mask(
        self,
        box: Tuple[float, float, float, float],
        radius: float,
        outline_width: int = 0
    ) -> Image.Image:
        """Maska zaokrąglonego prostokąta (wypełnienie albo sama obwódka)"""
        mask = Image.new('L', self.layout.size, 0)
        draw = ImageDraw.Draw(mask)
        x, y, w, h = box
        if outline_width:
            round_rect(draw, x, y, w, h, radius, outline=255, width=outline_width)
        else:
            round_rect(draw, x, y, w, h, radius, fill=255)
        return mask

    def _composite(self, surface: RenderSurface, layer: Image.Image):
        surface.image.alpha_composite(layer)

    # === SEKCJE ===

    def _draw_frame(self, surface: RenderSurface, card: 'CardInput'):
        """Tło, panel i metaliczna obwódka"""
        lay = self.layout
        palette = resolve_frame(card.frame_style)
        width, height = lay.size

        surface.clear()

        # Tło na całą kartę
        background = self._create_gradient(width, height, palette.background_stops)
        self._composite(surface, background)

        # Wewnętrzny panel
        layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        pad = lay.frame_padding
        round_rect(
            draw, pad, pad, width - pad * 2, height - pad * 2,
            lay.frame_radius, fill=hex_to_rgba(palette.panel_fill)
        )
        self._composite(surface, layer)

        # Obwódka - linia wyśrodkowana na ścieżce
        inset = pad + lay.border_inset
        half = lay.border_width / 2
        border_box = (
            inset - half,
            inset - half,
            width - inset * 2 + lay.border_width,
            height - inset * 2 + lay.border_width
        )
        mask = self._rounded_mask(
            border_box, lay.frame_radius - lay.border_width + half, lay.border_width
        )
        gradient = self._create_gradient(
            width, height, palette.border_stops, start_y=pad, end_y=height - pad
        )
        layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
        layer.paste(gradient, (0, 0), mask)
        self._composite(surface, layer)

    def _draw_illustration(self, surface: RenderSurface, card: 'CardInput'):
        """Panel ilustracji z obrazem dopasowanym (contain) albo podpisem"""
        lay = self.layout
        ill_x = lay.illustration_padding
        ill_y = lay.illustration_y
        ill_w = lay.illustration_width
        ill_h = lay.illustration_height

        layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        round_rect(
            draw, ill_x, ill_y, ill_w, ill_h, lay.illustration_radius,
            fill=hex_to_rgba(self.colors.illustration_panel, lay.illustration_alpha)
        )
        self._composite(surface, layer)

        image = card.illustration
        if image is not None:
            fit = fit_contain(image.width, image.height, ill_w, ill_h)
            size = (int(round(fit.width)), int(round(fit.height)))
            if fit.is_empty or size[0] <= 0 or size[1] <= 0:
                logger.debug("Ilustracja o zerowym rozmiarze - pomijam")
                return
            scaled = image.convert('RGBA').resize(size, Image.Resampling.LANCZOS)
            layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
            layer.paste(scaled, (int(round(ill_x + fit.offset_x)), int(round(ill_y + fit.offset_y))))
            self._composite(surface, layer)
        else:
            draw = ImageDraw.Draw(surface.image)
            font = self.font_manager.get_font(self.typography.caption_size)
            draw.text(
                (ill_x + ill_w / 2, ill_y + ill_h / 2),
                PLACEHOLDER_CAPTION,
                font=font,
                fill=self.colors.caption,
                anchor="ms"
            )

    def _draw_header(self, surface: RenderSurface, card: 'CardInput'):
        """Pasek nagłówka: tytuł, gracz, nazwa potwora i tag rasy"""
        lay = self.layout
        typo = self.typography
        colors = self.colors

        # Tło z gradientem
        box = (lay.header_x, lay.header_y, lay.header_width, lay.header_height)
        mask = self._rounded_mask(box, lay.header_radius)
        gradient = self._create_gradient(
            lay.canvas_width, lay.canvas_height, colors.header_stops,
            start_y=lay.header_y, end_y=lay.header_y + lay.header_height
        )
        layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
        layer.paste(gradient, (0, 0), mask)
        self._composite(surface, layer)

        race_text = truncate_code_units(card.race, TEXT_CAPS["race"])
        anchors = header_anchors(race_text, lay)

        draw = ImageDraw.Draw(surface.image)

        # 1. linia: tytuł (lewo) + gracz (prawo, z miejscem na tag)
        font_small = self.font_manager.get_font(typo.header_line_size, bold=True)
        title = truncate(card.title, TEXT_CAPS["title"])
        username = truncate(card.username, TEXT_CAPS["username"])
        if title:
            draw.text(
                (anchors.title_x, anchors.first_line_y), title,
                font=font_small, fill=colors.text_primary, anchor="lm"
            )
        if username:
            draw.text(
                (anchors.username_right_x, anchors.first_line_y), username,
                font=font_small, fill=colors.text_primary, anchor="rm"
            )

        # 2. linia: nazwa potwora (środek)
        monster_name = truncate(card.monster_name, TEXT_CAPS["monster_name"])
        if monster_name:
            font_big = self.font_manager.get_font(typo.monster_name_size, bold=True)
            draw.text(
                (anchors.monster_x, anchors.monster_y), monster_name,
                font=font_big, fill=colors.text_primary, anchor="mm"
            )

        # Tag rasy
        if anchors.has_race_tag:
            tag_x, tag_y, tag_w, tag_h = anchors.race_tag_box
            round_rect(
                draw, tag_x, tag_y, tag_w, tag_h, lay.race_tag_radius,
                fill=colors.race_tag_fill
            )
            font_tag = self.font_manager.get_font(typo.race_tag_size, bold=True)
            draw.text(
                anchors.race_text_center, race_text,
                font=font_tag, fill=colors.race_tag_text, anchor="mm"
            )

    def _draw_labels(self, surface: RenderSurface, card: 'CardInput'):
        """EX / Battle Meme pod ilustracją (tylko niepuste)"""
        lay = self.layout
        draw = ImageDraw.Draw(surface.image)
        font = self.font_manager.get_font(self.typography.label_size)

        lines = []
        if card.ex_name:
            lines.append(f"EX: {truncate(card.ex_name, TEXT_CAPS['label'])}")
        if card.battle_meme_name:
            lines.append(f"Battle Meme: {truncate(card.battle_meme_name, TEXT_CAPS['label'])}")

        y = lay.illustration_y + lay.illustration_height + lay.labels_offset
        for line in lines:
            draw.text(
                (lay.labels_x, y), line,
                font=font, fill=self.colors.text_primary, anchor="ls"
            )
            y += lay.labels_line_height

    def _draw_techniques(self, surface: RenderSurface, card: 'CardInput'):
        """Siatka technik: class_count kolumn x 6 wierszy, kolejność kolumnowa"""
        lay = self.layout
        colors = self.colors

        # Panel pod siatką
        inflate = lay.grid_panel_inflate
        layer = Image.new('RGBA', lay.size, (0, 0, 0, 0))
        round_rect(
            ImageDraw.Draw(layer),
            lay.grid_x - inflate, lay.grid_y - inflate,
            lay.grid_width + inflate * 2, lay.grid_height + inflate * 2,
            lay.grid_panel_radius,
            fill=hex_to_rgba(colors.grid_panel, lay.grid_panel_alpha)
        )
        self._composite(surface, layer)

        draw = ImageDraw.Draw(surface.image)
        font = self.font_manager.get_font(self.typography.technique_size)

        for cell in technique_cells(card.class_count, lay):
            draw.rectangle(
                [cell.x, cell.y, cell.x + cell.width, cell.y + cell.height],
                outline=colors.grid_line,
                width=1
            )
            text = truncate(technique_at(card.techniques, cell.index), TEXT_CAPS["technique"])
            if text:
                draw.text(
                    (cell.x + lay.grid_text_inset, cell.y + cell.height / 2), text,
                    font=font, fill=colors.text_primary, anchor="lm"
                )

    # === API ===

    def render(self, surface: Optional[RenderSurface], card: 'CardInput') -> bool:
        """
        Pełne przerysowanie karty. Bez powierzchni nic nie robi.
        Zwraca True, jeśli przebieg się wykonał.
        """
        if surface is None:
            logger.debug("Brak powierzchni - pomijam renderowanie")
            return False

        self._draw_frame(surface, card)
        self._draw_illustration(surface, card)
        self._draw_header(surface, card)
        self._draw_labels(surface, card)
        self._draw_techniques(surface, card)

        surface.render_count += 1
        logger.debug(
            f"Karta wyrenderowana ({card.frame_style.value}, klasy: {card.class_count})"
        )
        return True


def render_card(card: 'CardInput', renderer: Optional[CardRenderer] = None) -> RenderSurface:
    """Szybkie renderowanie na nowej powierzchni"""
    renderer = renderer or CardRenderer()
    surface = RenderSurface(renderer.layout)
    renderer.render(surface, card)
    return surface
