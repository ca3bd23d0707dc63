"""
Card Session - Stan formularza karty
- Zmienne pola formularza
- Snapshot dla renderera
- Reset do wartości domyślnych
- Jedno renderowanie na każdą zmianę
"""

import logging
from typing import Optional, Dict, Any, Callable, List

from PIL import Image

from card_graphics.templates import FrameStyle, parse_frame_style

from .card_input import (
    CardInput,
    DEFAULT_RACES,
    DEFAULT_TITLE,
    MAX_TECHNIQUES,
    TECHNIQUES_PER_CLASS,
    validate_class_count
)
from .image_loader import ImageLoader, IllustrationSource

logger = logging.getLogger(__name__)


class CardSession:
    """
    Trzyma pola formularza i zleca przerysowanie karty po każdej zmianie.
    Techniki są trzymane dla 4 klas (24 pola); snapshot bierze class_count * 6.
    """

    RESET_FIELDS: Dict[str, Any] = {
        "frame_style": FrameStyle.NEO,
        "class_count": 1,
        "title": "",
        "username": "",
        "monster_name": "",
        "ex_name": "",
        "battle_meme_name": "",
        "race_preset": DEFAULT_RACES[0],
        "race_custom": "",
        "use_default_illustration": True,
        "upload": None,
    }

    INITIAL_FIELDS: Dict[str, Any] = {**RESET_FIELDS, "title": DEFAULT_TITLE}

    TEXT_FIELDS = (
        "title", "username", "monster_name", "ex_name",
        "battle_meme_name", "race_preset", "race_custom"
    )


    def __init__(
        self,
        on_render: Optional[Callable[[CardInput], None]] = None,
        loader: Optional[ImageLoader] = None
    ):
        self.on_render = on_render
        self.loader = loader or ImageLoader()

        self.fields: Dict[str, Any] = dict(self.INITIAL_FIELDS)
        self.techniques: List[str] = [""] * MAX_TECHNIQUES
        self.loader.load(self.illustration_source)
        logger.info("Sesja karty zainicjalizowana")

    # === ODCZYT ===

    @property
    def illustration_source(self) -> IllustrationSource:
        return IllustrationSource(
            use_default=self.fields["use_default_illustration"],
            upload=self.fields["upload"]
        )

    @property
    def illustration(self) -> Optional[Image.Image]:
        return self.loader.image

    def snapshot(self) -> CardInput:
        """Niezmienny snapshot do jednego przebiegu renderowania"""
        f = self.fields
        count = f["class_count"]
        return CardInput.create(
            frame_style=f["frame_style"],
            class_count=count,
            title=f["title"],
            username=f["username"],
            monster_name=f["monster_name"],
            ex_name=f["ex_name"],
            battle_meme_name=f["battle_meme_name"],
            race_preset=f["race_preset"],
            race_custom=f["race_custom"],
            techniques=self.techniques[:count * TECHNIQUES_PER_CLASS],
            illustration=self.loader.image
        )

    # === ZMIANY ===

    def _normalize(self, key: str, value: Any) -> Any:
        if key == "frame_style" and not isinstance(value, FrameStyle):
            return parse_frame_style(str(value))
        if key == "class_count":
            return validate_class_count(int(value))
        if key in self.TEXT_FIELDS:
            return value or ""
        if key == "use_default_illustration":
            return bool(value)
        return value

    def update(self, **changes: Any) -> bool:
        """
        Aktualizuje pola (opcjonalnie też `techniques`).
        Zleca jedno renderowanie, gdy coś się faktycznie zmieniło.
        """
        techniques = changes.pop("techniques", None)

        unknown = [k for k in changes if k not in self.RESET_FIELDS]
        if unknown:
            raise KeyError(f"Nieznane pola karty: {', '.join(unknown)}")

        normalized = {k: self._normalize(k, v) for k, v in changes.items()}
        changed = {k for k, v in normalized.items() if self.fields[k] != v}
        self.fields.update(normalized)

        if techniques is not None:
            items = [v or "" for v in list(techniques)[:MAX_TECHNIQUES]]
            items += [""] * (MAX_TECHNIQUES - len(items))
            if items != self.techniques:
                self.techniques = items
                changed.add("techniques")

        if not changed:
            return False

        if changed & {"use_default_illustration", "upload"}:
            self.loader.load(self.illustration_source)

        self._schedule_render()
        return True

    def set_technique(self, index: int, value: str) -> bool:
        if not 0 <= index < MAX_TECHNIQUES:
            raise IndexError(f"Indeks techniki poza zakresem: {index}")
        if self.techniques[index] == (value or ""):
            return False
        self.techniques[index] = value or ""
        self._schedule_render()
        return True

    def set_techniques(self, values: List[str]) -> bool:
        """Ustawia techniki od początku listy, resztę czyści"""
        return self.update(techniques=values)

    def upload_illustration(self, data: bytes) -> bool:
        """Wybiera przesłany plik jako ilustrację"""
        return self.update(use_default_illustration=False, upload=data)

    def upload_illustration_async(self, data: bytes):
        """Jak upload_illustration, ale dekodowanie w tle; render dopiero w poll()"""
        self.fields["use_default_illustration"] = False
        self.fields["upload"] = data
        return self.loader.load_async(self.illustration_source)

    def reset(self):
        """Przywraca wartości domyślne i zleca jedno renderowanie"""
        self.fields = dict(self.RESET_FIELDS)
        self.techniques = [""] * MAX_TECHNIQUES
        self.loader.load(self.illustration_source)
        logger.info("Formularz karty zresetowany")
        self._schedule_render()

    # === RENDEROWANIE ===

    def render(self):
        """Bezwarunkowo zleca renderowanie bieżącego stanu (np. pierwszy podgląd)"""
        self._schedule_render()

    def poll(self) -> bool:
        """
        Wywoływane z wątku właściciela: renderuje, jeśli w tle
        załadowano nową ilustrację. Zwraca True, gdy był render.
        """
        if not self.loader.take_loaded():
            return False
        self._schedule_render()
        return True

    def _schedule_render(self):
        if self.on_render is not None:
            self.on_render(self.snapshot())
