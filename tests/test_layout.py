import pytest
from PIL import Image, ImageDraw

from card_graphics.card_renderer import round_rect
from card_graphics.layout import (
    DEGENERATE_FIT,
    FitResult,
    clamp_radius,
    fit_contain,
    header_anchors,
    technique_at,
    technique_cells,
    truncate,
    truncate_code_units,
)
from card_graphics.templates import DEFAULT_LAYOUT


class TestFitContain:
    def test_wide_image_in_square_box(self) -> None:
        assert fit_contain(400, 200, 200, 200) == FitResult(200, 100, 0, 50)

    def test_tall_image_in_square_box(self) -> None:
        assert fit_contain(100, 400, 200, 200) == FitResult(50, 200, 75, 0)

    def test_small_image_is_scaled_up(self) -> None:
        assert fit_contain(10, 10, 100, 50) == FitResult(50, 50, 25, 0)

    @pytest.mark.parametrize(
        "src,dst",
        [
            ((64, 64), (624, 580)),
            ((1920, 1080), (624, 580)),
            ((300, 1200), (624, 580)),
            ((1, 1000), (200, 200)),
        ],
    )
    def test_never_exceeds_destination(self, src, dst) -> None:
        fit = fit_contain(*src, *dst)

        assert fit.width <= dst[0] + 1e-9
        assert fit.height <= dst[1] + 1e-9
        assert fit.offset_x == pytest.approx((dst[0] - fit.width) / 2)
        assert fit.offset_y == pytest.approx((dst[1] - fit.height) / 2)
        assert fit.width / fit.height == pytest.approx(src[0] / src[1])

    @pytest.mark.parametrize("src", [(0, 100), (100, 0), (0, 0), (-5, 10)])
    def test_degenerate_source(self, src) -> None:
        fit = fit_contain(*src, 200, 200)

        assert fit == DEGENERATE_FIT
        assert fit.is_empty


class TestRoundRect:
    def test_radius_clamped_to_half_of_shorter_side(self) -> None:
        assert clamp_radius(40, 20, 50) == 10

    def test_radius_kept_when_small_enough(self) -> None:
        assert clamp_radius(100, 100, 20) == 20

    def test_negative_dimensions_give_zero_radius(self) -> None:
        assert clamp_radius(-10, 20, 8) == 0

    def test_draw_returns_effective_radius(self) -> None:
        img = Image.new("L", (100, 100), 0)
        radius = round_rect(ImageDraw.Draw(img), 10, 10, 40, 20, 50, fill=255)

        assert radius == 10
        x0, y0, x1, y1 = img.getbbox()
        assert x0 >= 10 and y0 >= 10
        assert x1 <= 51 and y1 <= 31

    def test_zero_size_draws_nothing(self) -> None:
        img = Image.new("L", (100, 100), 0)
        round_rect(ImageDraw.Draw(img), 10, 10, 0, 20, 8, fill=255)

        assert img.getbbox() is None


class TestTruncate:
    def test_hard_prefix_cut(self) -> None:
        text = "abcdefghijklmnopqrstuvwxyz0123"

        result = truncate(text, 18)

        assert result == text[:18]
        assert len(result) == 18
        assert "…" not in result and not result.endswith("...")

    def test_short_text_unchanged(self) -> None:
        assert truncate("魔族", 6) == "魔族"

    def test_none_becomes_empty(self) -> None:
        assert truncate(None, 6) == ""


class TestTruncateCodeUnits:
    def test_bmp_text_cut_like_characters(self) -> None:
        assert truncate_code_units("ABCDEFGHIJ", 6) == "ABCDEF"
        assert truncate_code_units("魔族", 6) == "魔族"

    def test_astral_characters_count_twice(self) -> None:
        assert truncate_code_units("😀😀😀😀", 6) == "😀😀😀"

    def test_split_surrogate_pair_dropped(self) -> None:
        assert truncate_code_units("ABCDE😀", 6) == "ABCDE"
        assert truncate_code_units("A😀😀😀", 6) == "A😀😀"

    def test_none_becomes_empty(self) -> None:
        assert truncate_code_units(None, 6) == ""


class TestHeaderAnchors:
    def test_race_tag_reserves_space(self) -> None:
        anchors = header_anchors("魔族")

        assert anchors.has_race_tag
        assert anchors.reserved_right == 64 + 40 + 8
        assert anchors.username_right_x == 32 + 656 - 16 - 112
        assert anchors.race_tag_box == (616, 72, 64, 116)
        assert anchors.race_text_center == (648, 130)

    def test_without_race_username_uses_full_width(self) -> None:
        anchors = header_anchors("")

        assert not anchors.has_race_tag
        assert anchors.reserved_right == 0
        assert anchors.username_right_x == 672
        assert anchors.race_tag_box == ()

    def test_text_lines(self) -> None:
        anchors = header_anchors("")

        assert anchors.title_x == 48
        assert anchors.first_line_y == 98
        assert (anchors.monster_x, anchors.monster_y) == (360, 152)


class TestTechniqueCells:
    def test_cell_count(self) -> None:
        for count in range(1, 5):
            assert len(technique_cells(count)) == count * 6

    def test_column_major_mapping(self) -> None:
        cells = {cell.index: cell for cell in technique_cells(2)}

        cell = cells[7]

        assert (cell.column, cell.row) == (1, 1)
        assert cell.x == DEFAULT_LAYOUT.grid_x + 312
        assert cell.y == DEFAULT_LAYOUT.grid_y + 40

    def test_cells_cover_grid(self) -> None:
        cells = technique_cells(4)

        assert cells[0].x == 48 and cells[0].y == 832
        assert cells[-1].x + cells[-1].width == pytest.approx(48 + 624)
        assert cells[-1].y + cells[-1].height == pytest.approx(832 + 240)

    def test_out_of_range_index_reads_empty(self) -> None:
        assert technique_at(("a", "b"), 5) == ""
        assert technique_at(("a", "b"), -1) == ""
        assert technique_at(("a", "b"), 1) == "b"
