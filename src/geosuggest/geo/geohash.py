"""geohash 工具函数模块.

在 pygeohash 之上提供补全建议器地理上下文需要的 geohash 操作：
合法性校验、编解码、相邻单元计算以及距离到 geohash 层级的换算。
"""

import math

import pygeohash as pgh

from geosuggest.geo.exceptions import InvalidDistanceError, InvalidGeohashError

# pygeohash 默认编码长度，也是 Elasticsearch 中 geohash 的最大层级
GEOHASH_MAX_PRECISION = 12

BASE32_ALPHABET = "0123456789bcdefghjkmnpqrstuvwxyz"
_BASE32_CHARS = frozenset(BASE32_ALPHABET)

# WGS84 椭球参数（米）
EARTH_SEMI_MAJOR_AXIS = 6378137.0
EARTH_SEMI_MINOR_AXIS = 6356752.314245
EARTH_EQUATOR = 2 * math.pi * EARTH_SEMI_MAJOR_AXIS
EARTH_POLAR_DISTANCE = math.pi * EARTH_SEMI_MINOR_AXIS


def validate_geohash(geohash: str) -> str:
    """校验 geohash 字符串.

    Args:
        geohash: 待校验的 geohash

    Returns:
        原样返回通过校验的 geohash

    Raises:
        InvalidGeohashError: 为空、长度超过 12 或包含非 base32 字符时抛出
    """
    if not isinstance(geohash, str) or not geohash:
        raise InvalidGeohashError("geohash 不能为空")
    if len(geohash) > GEOHASH_MAX_PRECISION:
        raise InvalidGeohashError(
            f"geohash 长度不能超过 {GEOHASH_MAX_PRECISION}，当前值: '{geohash}'"
        )
    invalid_chars = sorted(set(geohash) - _BASE32_CHARS)
    if invalid_chars:
        raise InvalidGeohashError(
            f"geohash '{geohash}' 包含非法字符: {''.join(invalid_chars)}"
        )
    return geohash


def encode(lat: float, lon: float, precision: int = GEOHASH_MAX_PRECISION) -> str:
    """将经纬度编码为指定长度的 geohash."""
    return pgh.encode(lat, lon, precision=precision)


def decode(geohash: str) -> tuple[float, float]:
    """将 geohash 解码为单元中心点的 (lat, lon)."""
    validate_geohash(geohash)
    lat, lon, _, _ = pgh.decode_exactly(geohash)
    return lat, lon


def adjacent_cells(geohash: str) -> list[str]:
    """计算与给定单元相邻（含对角）的同层级单元.

    相邻单元由 pygeohash.get_adjacent 按方向推导，经度方向跨越 ±180 时回绕；
    上下两行越过南北极时被跳过，因此靠近两极的单元返回少于 8 个相邻单元。

    Args:
        geohash: 中心单元

    Returns:
        相邻单元列表，不包含中心单元本身

    Examples:
        >>> len(adjacent_cells("u4pruy"))
        8
    """
    validate_geohash(geohash)
    lat, _, lat_err, _ = pgh.decode_exactly(geohash)

    rows = [geohash]
    if lat + 2 * lat_err < 90.0:
        rows.append(pgh.get_adjacent(geohash, "top"))
    if lat - 2 * lat_err > -90.0:
        rows.append(pgh.get_adjacent(geohash, "bottom"))

    cells: dict[str, None] = {}
    for row in rows:
        for cell in (
            row,
            pgh.get_adjacent(row, "left"),
            pgh.get_adjacent(row, "right"),
        ):
            if cell != geohash:
                cells[cell] = None
    return list(cells)


def cell_size(precision: int) -> tuple[float, float]:
    """返回指定层级 geohash 单元在赤道处的 (宽, 高)，单位米."""
    bits = precision * 5
    lon_bits = (bits + 1) // 2
    lat_bits = bits // 2
    return EARTH_EQUATOR / (1 << lon_bits), EARTH_POLAR_DISTANCE / (1 << lat_bits)


def level_for_distance(meters: float) -> int:
    """将距离换算为 geohash 层级.

    返回单元宽和高都不超过该距离的最粗层级，结果落在 [1, 12] 区间内。
    距离为 0 时返回最大层级。

    Args:
        meters: 距离，单位米

    Returns:
        geohash 层级（即 geohash 字符串长度）

    Raises:
        InvalidDistanceError: 距离为负数或不是有限数值时抛出

    Examples:
        >>> level_for_distance(5000)
        5
    """
    if math.isnan(meters) or math.isinf(meters) or meters < 0:
        raise InvalidDistanceError(f"距离必须为非负有限数值，当前值: {meters}")
    for level in range(1, GEOHASH_MAX_PRECISION + 1):
        width, height = cell_size(level)
        if width <= meters and height <= meters:
            return level
    return GEOHASH_MAX_PRECISION
