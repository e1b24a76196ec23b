"""Tests for output encoding, recompression and configuration."""

import pytest
from PIL import Image

from stylesprite import imaging
from stylesprite.config import SpriteConfig
from stylesprite.errors import (ConfigurationError, EncodingError,
                                ExternalToolError, ImageLoadError,
                                UnsupportedFormatError)
from stylesprite.layout import Sprite


class TestConfig:

    @pytest.mark.parametrize("name,fmt", [
        ("out/sprite.png", "png"), ("sprite.GIF", "gif"),
        ("sprite.jpg", "jpg"), ("sprite.jpeg", "jpeg"),
    ])
    def test_output_format(self, name, fmt):
        assert SpriteConfig(output_file=name).output_format == fmt

    @pytest.mark.parametrize("name", ["out/sprite", "sprite.", "sprite.tar.bz2"])
    def test_missing_or_unknown_extension(self, name):
        with pytest.raises(ConfigurationError):
            SpriteConfig(output_file=name)

    def test_invalid_output_format(self):
        with pytest.raises(ConfigurationError) as exc:
            Sprite(output_file="sprite.bmp")
        assert "'bmp'" in str(exc.value)

    def test_pngcrush_only_for_png(self):
        assert SpriteConfig(output_file="s.png", pngcrush="optipng").pngcrush == "optipng"
        assert SpriteConfig(output_file="s.gif", pngcrush="optipng").pngcrush is None

    def test_placeholder(self):
        assert Sprite(placeholder="SP").register("a.png") == "SP(1)"
        with pytest.raises(ConfigurationError):
            SpriteConfig(placeholder="")


class TestImaging:

    def test_image_format(self):
        assert imaging.image_format("a/b.JPG") == "JPEG"
        with pytest.raises(UnsupportedFormatError):
            imaging.image_format("a.webp")

    @pytest.mark.parametrize("name", ["a.gif", "a.jpg"])
    def test_open_other_formats(self, make_image, image_root, name):
        make_image(name, (6, 3))
        img = imaging.open_image(str(image_root / name))
        assert img.mode == "RGBA"
        assert img.size == (6, 3)

    def test_decompression_bomb(self, make_image, image_root, monkeypatch):
        make_image("big.png", (100, 100))
        monkeypatch.setattr(Image, "MAX_IMAGE_PIXELS", 1000)
        with pytest.raises(ImageLoadError) as exc:
            imaging.open_image(str(image_root / "big.png"), lineno=4)
        assert exc.value.lineno == 4
        assert isinstance(exc.value.__cause__, Image.DecompressionBombError)

    def test_png_extension_must_hold_png(self, make_image, image_root):
        make_image("a.gif", (6, 3))
        (image_root / "a.png").write_bytes((image_root / "a.gif").read_bytes())
        with pytest.raises(ImageLoadError):
            imaging.open_image(str(image_root / "a.png"))

    def test_create_image_minimum(self):
        img = imaging.create_image(0, 2)
        assert img.size == (5, 5)
        assert img.getpixel((0, 0)) == imaging.TRANSPARENT

    def test_copy_region_clips(self):
        src = Image.new("RGBA", (10, 10), (1, 2, 3, 255))
        dst = imaging.create_image(8, 8)
        imaging.copy_region(src, dst, 4, 4, 0, 0, 10, 10)
        assert dst.getpixel((7, 7)) == (1, 2, 3, 255)
        assert dst.getpixel((3, 3)) == imaging.TRANSPARENT


class TestSave:

    def canvas(self):
        canvas = imaging.create_image(10, 10)
        canvas.paste((0, 255, 0, 255), (0, 0, 5, 5))
        return canvas

    def test_png(self, tmp_path):
        path = str(tmp_path / "s.png")
        imaging.save_image(self.canvas(), path, "png")
        with Image.open(path) as out:
            assert out.format == "PNG"
            assert out.mode == "RGBA"
            assert out.getpixel((9, 9))[3] == 0

    def test_gif_transparency(self, tmp_path):
        path = str(tmp_path / "s.gif")
        imaging.save_image(self.canvas(), path, "gif")
        with Image.open(path) as out:
            assert out.format == "GIF"
            assert "transparency" in out.info
            out = out.convert("RGBA")
            assert out.getpixel((9, 9))[3] == 0
            assert out.getpixel((0, 0)) == (0, 255, 0, 255)

    def test_jpeg(self, tmp_path):
        path = str(tmp_path / "s.jpg")
        imaging.save_image(self.canvas(), path, "jpg", quality=80)
        with Image.open(path) as out:
            assert out.format == "JPEG"
            assert out.size == (10, 10)

    def test_unwritable(self, tmp_path):
        with pytest.raises(EncodingError):
            imaging.save_image(self.canvas(), str(tmp_path / "missing" / "s.png"), "png")


class TestCrush:

    def test_success(self, tmp_path, make_image, image_root):
        make_image("a.png", (4, 4))
        out = tmp_path / "sprite.png"
        sprite = Sprite(image_root=str(image_root), output_file=str(out), pngcrush="cp")
        sprite.register("a.png")
        sprite.build("")
        assert out.exists()
        assert [p.name for p in tmp_path.iterdir() if p.name.startswith("sprite.png_tmp")] == []

    def test_failure_is_fatal(self, tmp_path, make_image, image_root):
        make_image("a.png", (4, 4))
        sprite = Sprite(image_root=str(image_root), output_file=str(tmp_path / "sprite.png"),
                        pngcrush="false")
        sprite.register("a.png")
        with pytest.raises(ExternalToolError) as exc:
            sprite.build("")
        assert exc.value.returncode == 1

    def test_command_with_flags(self, tmp_path):
        path = tmp_path / "s.png"
        imaging.create_image(5, 5).save(path)
        imaging.crush("cp -p", str(path))
        assert path.exists()
        assert [p.name for p in tmp_path.iterdir()] == ["s.png"]

    def test_missing_tool(self, tmp_path):
        path = tmp_path / "s.png"
        imaging.create_image(5, 5).save(path)
        with pytest.raises(ExternalToolError):
            imaging.crush(str(tmp_path / "no-such-tool"), str(path))
