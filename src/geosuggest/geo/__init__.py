"""地理位置基础模块.

对 pygeohash 的轻量封装，为补全建议器的地理上下文提供坐标点模型和 geohash 操作。

主要功能:
    - GeoPoint: 地理坐标点数据模型，支持与 geohash 互相转换
    - GeoDistanceUnit: 距离单位枚举，支持解析 "5km" 这类距离字符串
    - adjacent_cells: 计算 geohash 单元的相邻单元
    - level_for_distance: 将距离换算为 geohash 层级

使用示例:
    from geosuggest.geo import GeoPoint, adjacent_cells

    point = GeoPoint(lat=57.64911, lon=10.40744)
    cell = point.geohash(precision=6)
    neighbours = adjacent_cells(cell)
"""

from geosuggest.geo.exceptions import (
    GeoError,
    InvalidDistanceError,
    InvalidGeohashError,
    InvalidGeoPointError,
)
from geosuggest.geo.geohash import (
    GEOHASH_MAX_PRECISION,
    adjacent_cells,
    level_for_distance,
    validate_geohash,
)
from geosuggest.geo.models import GeoDistanceUnit, GeoPoint

__all__ = [
    # 数据模型
    "GeoPoint",
    "GeoDistanceUnit",
    # geohash 工具
    "GEOHASH_MAX_PRECISION",
    "adjacent_cells",
    "level_for_distance",
    "validate_geohash",
    # 异常
    "GeoError",
    "InvalidGeoPointError",
    "InvalidGeohashError",
    "InvalidDistanceError",
]
