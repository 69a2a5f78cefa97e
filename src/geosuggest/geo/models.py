"""地理位置基础数据模型模块.

提供地理坐标点（GeoPoint）和距离单位枚举（GeoDistanceUnit）。
"""

import math
import re
from dataclasses import dataclass
from enum import Enum

from geosuggest.geo import geohash as geohash_utils
from geosuggest.geo.exceptions import InvalidDistanceError, InvalidGeoPointError

_DISTANCE_PATTERN = re.compile(r"^\s*(\d+(?:\.\d*)?|\.\d+)\s*([a-zA-Z]*)\s*$")


class GeoDistanceUnit(Enum):
    """地理距离单位枚举.

    提供 Elasticsearch 支持的距离单位选项，用于解析 "5km" 这类距离字符串。

    Attributes:
        INCH: 英寸 ("in")
        YARDS: 码 ("yd")
        FEET: 英尺 ("ft")
        KILOMETERS: 千米 ("km")
        NAUTICAL_MILES: 海里 ("nmi")
        MILLIMETERS: 毫米 ("mm")
        CENTIMETERS: 厘米 ("cm")
        MILES: 英里 ("mi")
        METERS: 米 ("m")
    """

    INCH = "in"
    YARDS = "yd"
    FEET = "ft"
    KILOMETERS = "km"
    NAUTICAL_MILES = "nmi"
    MILLIMETERS = "mm"
    CENTIMETERS = "cm"
    MILES = "mi"
    METERS = "m"

    @property
    def meters(self) -> float:
        """一个单位对应的米数."""
        return _METERS_PER_UNIT[self]

    def to_meters(self, value: float) -> float:
        """将以本单位表示的距离换算为米."""
        return value * self.meters

    @classmethod
    def parse_distance(
        cls, text: str, default_unit: "GeoDistanceUnit | None" = None
    ) -> float:
        """解析距离字符串并换算为米.

        Args:
            text: 距离字符串，如 "5km"、"150 m"、"0.5mi"
            default_unit: 未写单位时使用的单位，默认为米

        Returns:
            距离（米）

        Raises:
            InvalidDistanceError: 格式错误或单位未知时抛出

        Examples:
            >>> GeoDistanceUnit.parse_distance("5km")
            5000.0
        """
        match = _DISTANCE_PATTERN.match(text)
        if match is None:
            raise InvalidDistanceError(f"无法解析距离: '{text}'")
        value, suffix = match.groups()
        if not suffix:
            unit = default_unit or cls.METERS
        else:
            try:
                unit = cls(suffix.lower())
            except ValueError:
                raise InvalidDistanceError(
                    f"未知的距离单位 '{suffix}'，支持: {[u.value for u in cls]}"
                ) from None
        return unit.to_meters(float(value))


_METERS_PER_UNIT = {
    GeoDistanceUnit.INCH: 0.0254,
    GeoDistanceUnit.YARDS: 0.9144,
    GeoDistanceUnit.FEET: 0.3048,
    GeoDistanceUnit.KILOMETERS: 1000.0,
    GeoDistanceUnit.NAUTICAL_MILES: 1852.0,
    GeoDistanceUnit.MILLIMETERS: 0.001,
    GeoDistanceUnit.CENTIMETERS: 0.01,
    GeoDistanceUnit.MILES: 1609.344,
    GeoDistanceUnit.METERS: 1.0,
}


@dataclass(frozen=True)
class GeoPoint:
    """地理坐标点数据模型.

    表示一个地理坐标点，包含纬度和经度。
    创建时会自动校验经纬度范围的合法性。

    Attributes:
        lat: 纬度，范围 [-90, 90]
        lon: 经度，范围 [-180, 180]

    Raises:
        InvalidGeoPointError: 当经纬度超出合法范围或为 NaN 时抛出

    Examples:
        >>> point = GeoPoint(lat=57.64911, lon=10.40744)
        >>> point.geohash(precision=5)
        'u4pru'
    """

    lat: float
    lon: float

    def __post_init__(self) -> None:
        """校验经纬度范围."""
        if math.isnan(self.lat) or not -90 <= self.lat <= 90:
            raise InvalidGeoPointError(f"纬度值 {self.lat} 超出合法范围 [-90, 90]")
        if math.isnan(self.lon) or not -180 <= self.lon <= 180:
            raise InvalidGeoPointError(f"经度值 {self.lon} 超出合法范围 [-180, 180]")

    @classmethod
    def from_geohash(cls, geohash: str) -> "GeoPoint":
        """以 geohash 单元的中心点构造坐标点.

        Raises:
            InvalidGeohashError: geohash 非法时抛出
        """
        lat, lon = geohash_utils.decode(geohash)
        return cls(lat=lat, lon=lon)

    def geohash(self, precision: int = geohash_utils.GEOHASH_MAX_PRECISION) -> str:
        """编码为 geohash，默认使用最大层级 12."""
        return geohash_utils.encode(self.lat, self.lon, precision=precision)
