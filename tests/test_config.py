"""Tests for RenderConfig validation at the configuration boundary."""

import pytest

from qrstudio.color import RGBColor
from qrstudio.config import DEFAULT_BACKGROUND, DEFAULT_FOREGROUND, RenderConfig
from qrstudio.errors import ConfigError, InvalidColorFormat
from qrstudio.generator import ECCLevel


class TestDefaults:
    def test_defaults(self):
        cfg = RenderConfig()
        assert cfg.content == ""
        assert cfg.quiet_zone == 16
        assert cfg.ecc is ECCLevel.M
        assert cfg.foreground == DEFAULT_FOREGROUND
        assert cfg.background == DEFAULT_BACKGROUND
        assert cfg.width is None

    def test_empty_content_encodes_as_space(self):
        assert RenderConfig().encoder_text == " "
        assert RenderConfig(content="abc").encoder_text == "abc"


class TestCoercion:
    def test_ecc_letter_and_colors_coerced(self):
        cfg = RenderConfig(ecc="h", foreground="#fff", background=(0, 0, 0))
        assert cfg.ecc is ECCLevel.H
        assert cfg.foreground == RGBColor(255, 255, 255)
        assert cfg.background == RGBColor(0, 0, 0)


class TestValidation:
    @pytest.mark.parametrize("size", [0, -3, 1.5, "8", True])
    def test_module_size(self, size):
        with pytest.raises(ConfigError):
            RenderConfig(module_size=size)

    def test_quiet_zone_may_be_zero(self):
        assert RenderConfig(quiet_zone=0).quiet_zone == 0

    def test_negative_quiet_zone(self):
        with pytest.raises(ConfigError):
            RenderConfig(quiet_zone=-1)

    def test_width_minimum(self):
        with pytest.raises(ConfigError):
            RenderConfig(width=10)

    def test_unknown_ecc(self):
        with pytest.raises(ConfigError):
            RenderConfig(ecc="X")

    def test_bad_color(self):
        with pytest.raises(InvalidColorFormat):
            RenderConfig(foreground="#12")

    def test_content_must_be_text(self):
        with pytest.raises(ConfigError):
            RenderConfig(content=42)


class TestReplace:
    def test_replace_returns_new_snapshot(self):
        cfg = RenderConfig(content="a")
        new = cfg.replace(content="b")
        assert cfg.content == "a"
        assert new.content == "b"

    def test_replace_revalidates(self):
        with pytest.raises(ConfigError):
            RenderConfig().replace(module_size=0)

    def test_replace_unknown_field(self):
        with pytest.raises(ConfigError, match="colour"):
            RenderConfig().replace(colour="#000")

    def test_snapshot_is_frozen(self):
        cfg = RenderConfig()
        with pytest.raises(AttributeError):
            cfg.content = "changed"

    def test_from_mapping_skips_none(self):
        cfg = RenderConfig.from_mapping({"content": "x", "quiet_zone": None, "ecc": "Q"})
        assert cfg.content == "x"
        assert cfg.quiet_zone == 16
        assert cfg.ecc is ECCLevel.Q
