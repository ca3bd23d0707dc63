import pytest

from card_graphics.templates import FrameStyle
from card_state.card_input import (
    DEFAULT_RACES,
    CardInput,
    normalize_techniques,
    resolve_race,
)


class TestResolveRace:
    def test_preset_when_custom_empty(self) -> None:
        assert resolve_race("魔族", "") == "魔族"

    def test_custom_overrides_preset(self) -> None:
        assert resolve_race("魔族", "ゴーレム") == "ゴーレム"

    def test_whitespace_custom_falls_back_to_preset(self) -> None:
        assert resolve_race("人間", "   ") == "人間"

    def test_both_empty(self) -> None:
        assert resolve_race("", "") == ""


class TestNormalizeTechniques:
    def test_pads_to_class_size(self) -> None:
        result = normalize_techniques(["Fire"], 2)

        assert len(result) == 12
        assert result[0] == "Fire"
        assert set(result[1:]) == {""}

    def test_clips_extra_entries(self) -> None:
        result = normalize_techniques([str(i) for i in range(24)], 1)

        assert result == ("0", "1", "2", "3", "4", "5")

    def test_none_entries_become_empty(self) -> None:
        assert normalize_techniques([None, "a"], 1)[:2] == ("", "a")


class TestCardInput:
    def test_create_resolves_fields(self) -> None:
        card = CardInput.create(
            frame_style=FrameStyle.DARK,
            class_count=3,
            title="魔王スミノフ",
            race_preset="龍",
            race_custom="",
            techniques=["a", "b"],
        )

        assert card.frame_style is FrameStyle.DARK
        assert card.race == "龍"
        assert len(card.techniques) == 18
        assert card.techniques[:2] == ("a", "b")
        assert card.illustration is None

    def test_default_race_preset(self) -> None:
        assert CardInput.create().race == DEFAULT_RACES[0]

    @pytest.mark.parametrize("count", [0, 5, -1])
    def test_class_count_out_of_range(self, count) -> None:
        with pytest.raises(ValueError):
            CardInput.create(class_count=count)

    def test_direct_construction_keeps_invariant(self) -> None:
        card = CardInput(class_count=2, techniques=["x"] * 30)

        assert isinstance(card.techniques, tuple)
        assert len(card.techniques) == 12

    def test_snapshot_is_immutable(self) -> None:
        card = CardInput.create(title="a")

        with pytest.raises(AttributeError):
            card.title = "b"
