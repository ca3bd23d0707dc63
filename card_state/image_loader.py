"""
Image Loader - Ładowanie ilustracji karty
- Domyślna szachownica (placeholder)
- Dekodowanie przesłanych bajtów
- "Wygrywa ostatnie żądanie" (tokeny)
"""

import io
import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Optional

from PIL import Image, ImageDraw, UnidentifiedImageError

logger = logging.getLogger(__name__)

CHECKER_DARK = "#d9d9d9"
CHECKER_LIGHT = "#f0f0f0"


def make_checker_image(size: int = 32) -> Image.Image:
    """Szachownica 2x2 pola (domyślnie 64x64 px)"""
    side = size * 2
    img = Image.new('RGBA', (side, side), CHECKER_DARK)
    draw = ImageDraw.Draw(img)
    draw.rectangle([0, 0, size - 1, size - 1], fill=CHECKER_LIGHT)
    draw.rectangle([size, size, side - 1, side - 1], fill=CHECKER_LIGHT)
    return img


def decode_image(data: bytes) -> Optional[Image.Image]:
    """Dekoduje obraz z bajtów; None gdy format nieobsługiwany"""
    if not data:
        return None
    try:
        with Image.open(io.BytesIO(data)) as img:
            img.load()
            return img.convert('RGBA')
    except (UnidentifiedImageError, OSError, Image.DecompressionBombError) as e:
        logger.warning(f"Nie udało się zdekodować ilustracji: {e}")
        return None


@dataclass(frozen=True)
class IllustrationSource:
    """Źródło ilustracji: domyślna szachownica albo przesłany plik"""
    use_default: bool = True
    upload: Optional[bytes] = None

    @property
    def wants_upload(self) -> bool:
        return not self.use_default and bool(self.upload)


class ImageLoader:
    """
    Rozwiązuje źródło do zdekodowanego obrazu.
    Każde żądanie dostaje kolejny token; wynik jest stosowany tylko wtedy,
    gdy jego token jest wciąż aktualny.

    Wątek roboczy tylko podmienia obraz i ustawia flagę `loaded`;
    renderowanie zleca właściciel przez take_loaded().
    """

    def __init__(self, placeholder_size: int = 32):
        self.placeholder_size = placeholder_size
        self._placeholder: Optional[Image.Image] = None
        self._image: Optional[Image.Image] = None
        self._token = 0
        self._loaded = False
        self._lock = threading.Lock()
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def image(self) -> Optional[Image.Image]:
        return self._image

    def placeholder(self) -> Image.Image:
        if self._placeholder is None:
            self._placeholder = make_checker_image(self.placeholder_size)
        return self._placeholder

    def begin(self) -> int:
        """Rozpoczyna nowe żądanie, unieważniając poprzednie"""
        with self._lock:
            self._token += 1
            self._loaded = False
            return self._token

    def apply(self, token: int, image: Optional[Image.Image], mark_loaded: bool = False) -> bool:
        """Stosuje wynik, jeśli token jest aktualny"""
        with self._lock:
            if token != self._token:
                logger.debug(f"Pominięto nieaktualny wynik ładowania (token {token})")
                return False
            self._image = image
            self._loaded = mark_loaded
        return True

    def take_loaded(self) -> bool:
        """Czy od ostatniego odczytu doszedł wynik ładowania w tle (zeruje flagę)"""
        with self._lock:
            loaded, self._loaded = self._loaded, False
            return loaded

    def resolve(self, source: IllustrationSource) -> Optional[Image.Image]:
        """Upload jeśli wybrany i obecny, w przeciwnym razie szachownica"""
        if source.wants_upload:
            return decode_image(source.upload)
        return self.placeholder()

    def load(self, source: IllustrationSource) -> int:
        """Ładowanie synchroniczne w wątku wywołującym"""
        token = self.begin()
        self.apply(token, self.resolve(source))
        return token

    def load_async(self, source: IllustrationSource) -> Future:
        """Ładowanie w tle; nowsze żądanie zastępuje starsze"""
        token = self.begin()
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="image-loader")

        future = self._executor.submit(self.resolve, source)

        def _done(f: Future):
            if f.cancelled():
                return
            error = f.exception()
            if error is not None:
                logger.error(f"Błąd ładowania ilustracji: {error}")
                self.apply(token, None, mark_loaded=True)
                return
            self.apply(token, f.result(), mark_loaded=True)

        future.add_done_callback(_done)
        return future

    def shutdown(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
