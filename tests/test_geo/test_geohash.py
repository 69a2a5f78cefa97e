"""geohash 工具函数单元测试."""

import math

import pygeohash as pgh
import pytest

from geosuggest.geo.exceptions import InvalidDistanceError, InvalidGeohashError
from geosuggest.geo.geohash import (
    GEOHASH_MAX_PRECISION,
    adjacent_cells,
    cell_size,
    decode,
    encode,
    level_for_distance,
    validate_geohash,
)


class TestValidateGeohash:
    """validate_geohash 测试."""

    def test_valid_geohash(self) -> None:
        """测试合法 geohash 原样返回."""
        assert validate_geohash("u4pruydqqvj") == "u4pruydqqvj"

    def test_empty_raises(self) -> None:
        """测试空字符串抛出异常."""
        with pytest.raises(InvalidGeohashError, match="不能为空"):
            validate_geohash("")

    def test_non_string_raises(self) -> None:
        """测试非字符串抛出异常."""
        with pytest.raises(InvalidGeohashError):
            validate_geohash(None)  # type: ignore[arg-type]

    def test_too_long_raises(self) -> None:
        """测试长度超过 12 抛出异常."""
        with pytest.raises(InvalidGeohashError, match="长度不能超过"):
            validate_geohash("u4pruydqqvj12")

    @pytest.mark.parametrize("geohash", ["u4pa", "U4PR", "u4p r", "ilo"])
    def test_invalid_chars_raise(self, geohash: str) -> None:
        """测试非 base32 字符抛出异常."""
        with pytest.raises(InvalidGeohashError, match="非法字符"):
            validate_geohash(geohash)


class TestEncodeDecode:
    """encode / decode 测试."""

    def test_encode(self) -> None:
        """测试编码."""
        assert encode(42.6, -5.6, precision=5) == "ezs42"
        assert len(encode(42.6, -5.6)) == GEOHASH_MAX_PRECISION

    def test_decode_returns_center_inside_cell(self) -> None:
        """测试解码结果位于单元内部."""
        lat, lon = decode("ezs42")
        assert encode(lat, lon, precision=5) == "ezs42"

    def test_decode_invalid_raises(self) -> None:
        """测试解码非法 geohash 抛出异常."""
        with pytest.raises(InvalidGeohashError):
            decode("ezs4i")


class TestAdjacentCells:
    """adjacent_cells 测试."""

    def test_interior_cell_has_eight_neighbours(self) -> None:
        """测试普通单元有 8 个不同的相邻单元."""
        cells = adjacent_cells("u4pruy")
        assert len(cells) == 8
        assert len(set(cells)) == 8
        assert "u4pruy" not in cells
        assert all(len(cell) == 6 for cell in cells)

    def test_neighbours_surround_center(self) -> None:
        """测试相邻单元中心与中心单元的距离不超过一个单元."""
        center_lat, center_lon = decode("ezs42")
        for cell in adjacent_cells("ezs42"):
            lat, lon = decode(cell)
            assert abs(lat - center_lat) < 0.1
            assert abs(lon - center_lon) < 0.1

    def test_polar_cell_skips_beyond_pole(self) -> None:
        """测试北极附近的单元不生成越过极点的相邻单元."""
        cell = encode(89.9, 0.0, precision=1)
        assert len(adjacent_cells(cell)) == 5

    def test_longitude_wraps_around_antimeridian(self) -> None:
        """测试经度跨越 180 度时回绕."""
        cell = encode(0.1, 179.99, precision=3)
        longitudes = [decode(neighbour)[1] for neighbour in adjacent_cells(cell)]
        assert len(longitudes) == 8
        assert any(lon < 0 for lon in longitudes)

    def test_matches_directional_neighbours(self) -> None:
        """测试结果包含 pygeohash 按方向推导的四个正向相邻单元."""
        cells = set(adjacent_cells("u4pruy"))
        for direction in ("top", "bottom", "left", "right"):
            assert pgh.get_adjacent("u4pruy", direction) in cells

    def test_south_polar_cell_skips_beyond_pole(self) -> None:
        """测试南极附近的单元不生成越过极点的相邻单元."""
        cell = encode(-89.9, 0.0, precision=1)
        cells = adjacent_cells(cell)
        assert len(cells) == 5
        assert all(decode(neighbour)[0] >= decode(cell)[0] for neighbour in cells)

    def test_invalid_geohash_raises(self) -> None:
        """测试非法 geohash 抛出异常."""
        with pytest.raises(InvalidGeohashError):
            adjacent_cells("")


class TestLevelForDistance:
    """level_for_distance 测试."""

    def test_cell_size_shrinks_with_level(self) -> None:
        """测试单元尺寸随层级递减."""
        sizes = [cell_size(level) for level in range(1, GEOHASH_MAX_PRECISION + 1)]
        widths = [width for width, _ in sizes]
        assert widths == sorted(widths, reverse=True)

    @pytest.mark.parametrize(
        "meters, expected",
        [
            (10_000_000, 1),
            (5_000, 5),
            (1_000, 7),
            (1, 11),
            (0.001, 12),
            (0, 12),
        ],
    )
    def test_levels(self, meters: float, expected: int) -> None:
        """测试距离换算层级."""
        assert level_for_distance(meters) == expected

    def test_huge_distance_clamped_to_level_one(self) -> None:
        """测试超大距离取最粗层级."""
        assert level_for_distance(1e9) == 1

    @pytest.mark.parametrize("meters", [-1, math.nan, math.inf])
    def test_invalid_distance_raises(self, meters: float) -> None:
        """测试非法距离抛出异常."""
        with pytest.raises(InvalidDistanceError):
            level_for_distance(meters)
