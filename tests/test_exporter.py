import io

import pytest
from PIL import Image

from card_graphics.card_renderer import RenderSurface
from card_graphics.exporter import export_filename, export_png, save_png
from card_state.card_input import CardInput


class TestExportFilename:
    def test_title_used_as_name(self) -> None:
        assert export_filename("魔王スミノフ") == "魔王スミノフ.png"

    @pytest.mark.parametrize("title", ["", "   ", None])
    def test_fallback_name(self, title) -> None:
        assert export_filename(title) == "card.png"

    def test_path_characters_replaced(self) -> None:
        assert export_filename("a/b\\c:d") == "a_b_c_d.png"


class TestExportPng:
    def test_blank_surface_before_render(self) -> None:
        data = export_png(RenderSurface())

        img = Image.open(io.BytesIO(data))
        assert img.format == "PNG"
        assert img.size == (720, 1136)
        assert img.getchannel("A").getbbox() is None

    def test_rendered_surface(self, render) -> None:
        surface = render(CardInput.create(title="x"))

        img = Image.open(io.BytesIO(export_png(surface)))

        assert img.size == (720, 1136)
        assert img.getpixel((100, 40)) == (31, 41, 55, 255)

    def test_save_png(self, render, tmp_path) -> None:
        surface = render(CardInput.create(title="Hero"))

        path = save_png(surface, "Hero", tmp_path / "out")

        assert path == tmp_path / "out" / "Hero.png"
        assert path.read_bytes() == surface.to_bytes()
