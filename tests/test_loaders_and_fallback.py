"""Tests for the Pillow file loader and fallback providers."""

from pathlib import Path

import orjson
import pytest

from terrain_sprites.sprites.fallback import (
    ConstantFallbackProvider,
    PaletteFallbackProvider,
    TerrainPalette,
    blend_colors,
)
from terrain_sprites.sprites.loaders import FileSpriteLoader
from terrain_sprites.sprites.models import (
    Candidate,
    FailureReason,
    LoadFailure,
    LoadSuccess,
    TerrainAttributes,
)
from terrain_sprites.sprites.naming import NonePolicy, SpriteNaming


class TestFileSpriteLoader:
    """Test loading sprites from a flat directory."""

    def test_loads_existing_png(self, tmp_path: Path, write_sprite) -> None:
        """Test an existing PNG loads as an RGBA image."""
        write_sprite("forest.png")
        outcome = FileSpriteLoader(tmp_path).attempt_load(Candidate(("forest",)))

        assert isinstance(outcome, LoadSuccess)
        assert outcome.image.mode == "RGBA"
        assert outcome.path == f"{tmp_path.as_posix()}/forest.png"

    def test_missing_file_is_not_found(self, tmp_path: Path) -> None:
        """Test a missing file is reported as not found."""
        outcome = FileSpriteLoader(tmp_path).attempt_load(Candidate(("forest", "hot")))

        assert isinstance(outcome, LoadFailure)
        assert outcome.reason is FailureReason.NOT_FOUND

    def test_corrupt_file_is_undecodable(self, tmp_path: Path) -> None:
        """Test a corrupt file is reported as undecodable."""
        (tmp_path / "forest.png").write_bytes(b"definitely not a png")
        outcome = FileSpriteLoader(tmp_path).attempt_load(Candidate(("forest",)))

        assert isinstance(outcome, LoadFailure)
        assert outcome.reason is FailureReason.UNDECODABLE
        assert outcome.detail

    def test_skip_policy_reports_skipped(self, tmp_path: Path, write_sprite) -> None:
        """Test the skip policy reports none-prefixed candidates as skipped."""
        write_sprite("none-hot.png")
        loader = FileSpriteLoader(tmp_path, naming=SpriteNaming(NonePolicy.SKIP))
        outcome = loader.attempt_load(Candidate(("none", "hot")))

        assert isinstance(outcome, LoadFailure)
        assert outcome.reason is FailureReason.SKIPPED

    def test_resizes_to_sprite_size(self, tmp_path: Path, write_sprite) -> None:
        """Test loaded sprites are resized to the configured size."""
        write_sprite("hot.png", size=32)
        outcome = FileSpriteLoader(tmp_path, sprite_size=16).attempt_load(Candidate(("hot",)))

        assert isinstance(outcome, LoadSuccess)
        assert outcome.image.size == (16, 16)


class TestPaletteFallback:
    """Test flat colors derived from the terrain palette."""

    @pytest.mark.parametrize(
        "triple,expected",
        [
            (("grassland", "moderate", "lowlands"), "#7ec850"),
            (("forest", "hot", "mountains"), "#6caf51"),
            (("tundra", "cold", "hills"), "#c4e1f5"),
            (("none", "hot", "deep_water"), "#4a90e2"),
            (("swamp", "cold", "shallow_water"), "#7cb9e8"),
        ],
    )
    def test_default_palette_colors(self, triple, expected: str) -> None:
        """Test the packaged palette colors for land and water triples."""
        provider = PaletteFallbackProvider()
        marker = provider.fallback_for(TerrainAttributes.from_ids(*triple))
        assert marker.is_fallback
        assert marker.color == expected

    def test_blend_without_base_color(self) -> None:
        """Test blending without a base color gives the neutral gray."""
        assert blend_colors(None, "#ffaa77", 2) == "#cccccc"
        assert blend_colors("not-a-color", None, 0) == "#cccccc"

    def test_lightening_is_clamped(self) -> None:
        """Test elevation lightening never exceeds white."""
        assert blend_colors("#f0f0f0", None, 2) == "#ffffff"

    def test_palette_from_json(self, tmp_path: Path) -> None:
        """Test a palette can be loaded from a JSON file."""
        path = tmp_path / "palette.json"
        path.write_bytes(orjson.dumps({
            "default": "#000000",
            "height": {"lowlands": {"base_color": None, "elevation": 0}},
            "climate": {"moderate": {"color_tint": None}},
            "vegetation": {"forest": {"base_color": "#102030"}},
        }))
        palette = TerrainPalette.from_json(path)

        assert palette.color_for(TerrainAttributes.from_ids("forest", "moderate", "lowlands")) == "#102030"
        # Unknown water color falls back to the palette default
        assert palette.color_for(TerrainAttributes.from_ids("forest", "moderate", "deep_water")) == "#000000"

    def test_missing_vegetation_color_uses_default_unblended(self) -> None:
        """Test a land tile without a vegetation color gets the plain default color."""
        palette = TerrainPalette.from_dict({
            "default": "#000000",
            "height": {"hills": {"base_color": "#8b7355", "elevation": 1}},
            "climate": {"hot": {"color_tint": "#ffaa77"}},
            "vegetation": {},
        })

        assert palette.color_for(TerrainAttributes.from_ids("forest", "hot", "hills")) == "#000000"

    def test_palette_from_json_rejects_lists(self, tmp_path: Path) -> None:
        """Test a palette file that is not an object raises ValueError."""
        path = tmp_path / "palette.json"
        path.write_bytes(b"[1, 2, 3]")
        with pytest.raises(ValueError):
            TerrainPalette.from_json(path)

    def test_marker_image(self) -> None:
        """Test a fallback marker renders as a flat image."""
        marker = PaletteFallbackProvider().fallback_for(
            TerrainAttributes.from_ids("forest", "hot", "mountains")
        )
        image = marker.to_image(8)
        assert image.size == (8, 8)
        assert image.getpixel((0, 0)) == (0x6C, 0xAF, 0x51, 255)


class TestConstantFallback:
    """Test the single-color provider."""

    def test_same_color_for_every_triple(self) -> None:
        """Test the constant provider uses one color for every triple."""
        provider = ConstantFallbackProvider("#ABC123")
        colors = {
            provider.fallback_for(attributes).color
            for attributes in TerrainAttributes.all_combinations()
        }
        assert colors == {"#abc123"}

    def test_invalid_color(self) -> None:
        """Test an invalid constant color raises ValueError."""
        with pytest.raises(ValueError):
            ConstantFallbackProvider("red")
