"""地理位置基础模型异常定义模块."""

from geosuggest.exceptions import GeoSuggestError


class GeoError(GeoSuggestError):
    """地理位置基础异常."""

    pass


class InvalidGeoPointError(GeoError):
    """无效的地理坐标点异常（经纬度超出范围或不是有限数值）."""

    pass


class InvalidGeohashError(GeoError):
    """无效的 geohash 异常（为空、包含非 base32 字符或长度超过 12）."""

    pass


class InvalidDistanceError(GeoError):
    """无效的距离字符串异常（格式错误、单位未知或数值不为正）."""

    pass
