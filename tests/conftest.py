import io

import pytest
from PIL import Image

from card_graphics.card_renderer import CardRenderer, RenderSurface
from card_state.card_input import CardInput


@pytest.fixture(scope="session")
def renderer() -> CardRenderer:
    """Jeden renderer na całą sesję testów (cache fontów)"""
    return CardRenderer()


@pytest.fixture
def render(renderer):
    def _render(card: CardInput) -> RenderSurface:
        surface = RenderSurface(renderer.layout)
        assert renderer.render(surface, card)
        return surface
    return _render


@pytest.fixture
def red_image() -> Image.Image:
    return Image.new("RGBA", (400, 200), (255, 0, 0, 255))


@pytest.fixture
def png_bytes(red_image) -> bytes:
    buffer = io.BytesIO()
    red_image.save(buffer, format="PNG")
    return buffer.getvalue()
