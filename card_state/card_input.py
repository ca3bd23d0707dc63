"""
Card Input - Niezmienny snapshot danych karty
- Lista ras
- Rozstrzyganie rasy (preset vs. własna)
- Normalizacja listy technik
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, List

from PIL import Image

from card_graphics.templates import FrameStyle

MIN_CLASSES = 1
MAX_CLASSES = 4
TECHNIQUES_PER_CLASS = 6
MAX_TECHNIQUES = MAX_CLASSES * TECHNIQUES_PER_CLASS

DEFAULT_RACES: List[str] = [
    "魔族",
    "人間",
    "獣",
    "機械",
    "不死",
    "精霊",
    "龍",
    "天使",
    "悪魔",
]

DEFAULT_TITLE = "魔王スミノフ"


def resolve_race(preset: str, custom: str) -> str:
    """Własna rasa wygrywa, jeśli zawiera coś poza białymi znakami"""
    if custom and custom.strip():
        return custom
    return preset or ""


def normalize_techniques(techniques: Sequence[str], class_count: int) -> Tuple[str, ...]:
    """Dopełnia pustymi lub ucina listę do class_count * 6 pozycji"""
    size = class_count * TECHNIQUES_PER_CLASS
    items = [t or "" for t in list(techniques)[:size]]
    items.extend([""] * (size - len(items)))
    return tuple(items)


def validate_class_count(class_count: int) -> int:
    if not MIN_CLASSES <= class_count <= MAX_CLASSES:
        raise ValueError(
            f"Liczba klas musi być w zakresie {MIN_CLASSES}-{MAX_CLASSES}, podano {class_count}"
        )
    return class_count


@dataclass(frozen=True)
class CardInput:
    """Snapshot wszystkich pól karty dla jednego przebiegu renderowania"""
    frame_style: FrameStyle = FrameStyle.NEO
    class_count: int = 1
    title: str = ""
    username: str = ""
    monster_name: str = ""
    ex_name: str = ""
    battle_meme_name: str = ""
    race: str = ""
    techniques: Tuple[str, ...] = ("",) * TECHNIQUES_PER_CLASS
    illustration: Optional[Image.Image] = None

    def __post_init__(self):
        validate_class_count(self.class_count)
        expected = self.class_count * TECHNIQUES_PER_CLASS
        if not isinstance(self.techniques, tuple) or len(self.techniques) != expected:
            # Dane z zewnątrz - wyrównaj zamiast indeksować poza zakres
            object.__setattr__(
                self, "techniques", normalize_techniques(self.techniques, self.class_count)
            )

    @classmethod
    def create(
        cls,
        frame_style: FrameStyle = FrameStyle.NEO,
        class_count: int = 1,
        title: str = "",
        username: str = "",
        monster_name: str = "",
        ex_name: str = "",
        battle_meme_name: str = "",
        race_preset: str = DEFAULT_RACES[0],
        race_custom: str = "",
        techniques: Sequence[str] = (),
        illustration: Optional[Image.Image] = None
    ) -> 'CardInput':
        """Buduje snapshot z surowych wartości formularza"""
        validate_class_count(class_count)
        return cls(
            frame_style=frame_style,
            class_count=class_count,
            title=title or "",
            username=username or "",
            monster_name=monster_name or "",
            ex_name=ex_name or "",
            battle_meme_name=battle_meme_name or "",
            race=resolve_race(race_preset, race_custom),
            techniques=normalize_techniques(techniques, class_count),
            illustration=illustration
        )
