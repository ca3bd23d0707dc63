import pytest
from PIL import Image

import generator


class TestCli:
    def test_renders_card_to_output_dir(self, tmp_path) -> None:
        generator.main([
            "--no-header",
            "--title", "Hero",
            "--monster", "Slime",
            "--frame", "classic",
            "--classes", "2",
            "-t", "Fireball",
            "-t", "Ice Wall",
            "--output-dir", str(tmp_path),
        ])

        path = tmp_path / "Hero.png"
        assert path.exists()
        with Image.open(path) as img:
            assert img.size == (720, 1136)

    def test_reports_frame_palette_name(self, tmp_path, capsys) -> None:
        generator.main(["--no-header", "--frame", "holo", "--output-dir", str(tmp_path)])

        assert "Ramka: Holo" in capsys.readouterr().out

    def test_empty_title_uses_fallback_name(self, tmp_path) -> None:
        generator.main(["--no-header", "--title", "", "--output-dir", str(tmp_path)])

        assert (tmp_path / "card.png").exists()

    def test_uses_uploaded_illustration(self, tmp_path, png_bytes) -> None:
        art = tmp_path / "art.png"
        art.write_bytes(png_bytes)

        generator.main([
            "--no-header", "--title", "Art",
            "-i", str(art), "--output-dir", str(tmp_path),
        ])

        with Image.open(tmp_path / "Art.png") as img:
            r, g, b, _ = img.convert("RGBA").getpixel((360, 470))
        assert r >= 250 and g <= 5

    def test_missing_illustration_exits_with_error(self, tmp_path) -> None:
        with pytest.raises(SystemExit) as exc:
            generator.main([
                "--no-header",
                "-i", str(tmp_path / "missing.png"),
                "--output-dir", str(tmp_path),
            ])

        assert exc.value.code == 1

    def test_unknown_frame_rejected(self) -> None:
        with pytest.raises(SystemExit):
            generator.main(["--frame", "gold"])
