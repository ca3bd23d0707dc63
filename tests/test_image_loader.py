import io

from PIL import Image

from card_state.image_loader import (
    IllustrationSource,
    ImageLoader,
    decode_image,
    make_checker_image,
)

LIGHT = (240, 240, 240, 255)
DARK = (217, 217, 217, 255)


def _png(size) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, (0, 128, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


class TestCheckerImage:
    def test_default_size(self) -> None:
        assert make_checker_image().size == (64, 64)

    def test_tile_pattern(self) -> None:
        img = make_checker_image()

        assert img.getpixel((0, 0)) == LIGHT
        assert img.getpixel((63, 63)) == LIGHT
        assert img.getpixel((40, 0)) == DARK
        assert img.getpixel((0, 40)) == DARK

    def test_configurable_tile_size(self) -> None:
        img = make_checker_image(8)

        assert img.size == (16, 16)
        assert img.getpixel((7, 7)) == LIGHT
        assert img.getpixel((8, 7)) == DARK


class TestDecodeImage:
    def test_valid_png(self, png_bytes) -> None:
        img = decode_image(png_bytes)

        assert img is not None
        assert img.size == (400, 200)
        assert img.mode == "RGBA"

    def test_garbage_bytes(self) -> None:
        assert decode_image(b"not an image") is None

    def test_empty_bytes(self) -> None:
        assert decode_image(b"") is None


class TestImageLoader:
    def test_default_source_resolves_placeholder(self) -> None:
        loader = ImageLoader()

        loader.load(IllustrationSource())

        assert loader.image is loader.placeholder()

    def test_upload_ignored_when_default_selected(self, png_bytes) -> None:
        loader = ImageLoader()

        loader.load(IllustrationSource(use_default=True, upload=png_bytes))

        assert loader.image.size == (64, 64)

    def test_upload_selected_without_data_uses_placeholder(self) -> None:
        loader = ImageLoader()

        loader.load(IllustrationSource(use_default=False, upload=None))

        assert loader.image.size == (64, 64)

    def test_upload_selected(self, png_bytes) -> None:
        loader = ImageLoader()

        loader.load(IllustrationSource(use_default=False, upload=png_bytes))

        assert loader.image.size == (400, 200)

    def test_stale_token_is_ignored(self, red_image) -> None:
        loader = ImageLoader()
        first = loader.begin()
        second = loader.begin()

        assert second > first
        assert not loader.apply(first, red_image)
        assert loader.image is None
        assert loader.apply(second, red_image)
        assert loader.image is red_image

    def test_sync_load_is_not_marked_loaded(self) -> None:
        loader = ImageLoader()

        loader.load(IllustrationSource())

        assert not loader.take_loaded()

    def test_async_latest_request_wins(self) -> None:
        loader = ImageLoader()

        loader.load_async(IllustrationSource(use_default=False, upload=_png((30, 10))))
        loader.load_async(IllustrationSource(use_default=False, upload=_png((10, 30))))
        loader.shutdown()

        assert loader.image.size == (10, 30)
        assert loader.take_loaded()
        assert not loader.take_loaded()

    def test_new_request_clears_loaded_flag(self, png_bytes) -> None:
        loader = ImageLoader()
        loader.load_async(IllustrationSource(use_default=False, upload=png_bytes))
        loader.shutdown()

        loader.load(IllustrationSource())

        assert not loader.take_loaded()
        assert loader.image is loader.placeholder()
