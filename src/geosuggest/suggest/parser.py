"""地理查询上下文解析模块.

将补全建议请求中 contexts 下的地理上下文（JSON 解码后的 Python 值）
解析为 GeoQueryContext。

支持的输入形式:
    - 字符串: 直接作为 geohash，如 "u4pruydqqvj"
    - 对象: 按字段分发表逐字段写入构建器，支持的字段见 GEO_CONTEXT_FIELDS

使用示例:
    from geosuggest.suggest.parser import parse_geo_query_context

    ctx = parse_geo_query_context({"lat": 40.0, "lon": -70.0, "boost": 5, "precision": 3})
    ctx.neighbours  # (3,)
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any

from geosuggest.exceptions import (
    ContextParseError,
    InvalidQueryContextError,
    MalformedContextError,
)
from geosuggest.geo.exceptions import GeoError
from geosuggest.geo.geohash import level_for_distance
from geosuggest.geo.models import GeoDistanceUnit, GeoPoint
from geosuggest.suggest.mapping import (
    CONTEXT_BOOST,
    CONTEXT_LAT,
    CONTEXT_LON,
    CONTEXT_NEIGHBOURS,
    CONTEXT_PRECISION,
    CONTEXT_VALUE,
    DEFAULT_PRECISION,
    GEOHASH_FIELD,
)
from geosuggest.suggest.query_context import GeoQueryContext, GeoQueryContextBuilder

logger = logging.getLogger(__name__)


# ========== 取值转换 ==========


def _to_int(field: str, value: Any) -> int:
    """转换整数字段，浮点数截断取整，数字字符串按整数解析."""
    if isinstance(value, bool):
        raise ContextParseError(f"字段 [{field}] 必须为整数，当前值: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value):
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
    raise ContextParseError(f"字段 [{field}] 必须为整数，当前值: {value!r}")


def _to_float(field: str, value: Any) -> float:
    if isinstance(value, bool):
        raise ContextParseError(f"字段 [{field}] 必须为数值，当前值: {value!r}")
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    raise ContextParseError(f"字段 [{field}] 必须为数值，当前值: {value!r}")


def _to_precision(field: str, value: Any) -> int:
    """转换精度，既可以是 geohash 层级，也可以是 "5km" 这类距离字符串."""
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            pass
        try:
            return level_for_distance(GeoDistanceUnit.parse_distance(value))
        except GeoError as e:
            raise ContextParseError(f"字段 [{field}] 无法解析为精度: {e}") from e
    return _to_int(field, value)


def _to_precision_list(field: str, value: Any) -> list[int]:
    if not isinstance(value, (list, tuple)):
        raise ContextParseError(f"字段 [{field}] 必须为数组，当前值: {value!r}")
    return [_to_precision(field, item) for item in value]


def _to_point(field: str, value: Mapping[str, Any]) -> GeoPoint:
    """解析嵌套的坐标点对象，支持 {"lat", "lon"} 和 {"geohash"} 两种形式."""
    if GEOHASH_FIELD in value:
        geohash = value[GEOHASH_FIELD]
        if not isinstance(geohash, str):
            raise ContextParseError(
                f"字段 [{field}.{GEOHASH_FIELD}] 必须为字符串，当前值: {geohash!r}"
            )
        return GeoPoint.from_geohash(geohash)

    for key in (CONTEXT_LAT, CONTEXT_LON):
        if key not in value:
            raise ContextParseError(f"字段 [{field}] 缺少 [{key}]")
    return GeoPoint(
        lat=_to_float(f"{field}.{CONTEXT_LAT}", value[CONTEXT_LAT]),
        lon=_to_float(f"{field}.{CONTEXT_LON}", value[CONTEXT_LON]),
    )


def _to_location(field: str, value: Any) -> GeoPoint | str:
    if isinstance(value, str):
        return value
    if isinstance(value, Mapping):
        return _to_point(field, value)
    raise ContextParseError(f"字段 [{field}] 必须为对象或字符串，当前值: {value!r}")


def _set_location(builder: GeoQueryContextBuilder, location: GeoPoint | str) -> None:
    if isinstance(location, GeoPoint):
        builder.set_point(location)
    else:
        builder.set_geohash(location)


# ========== 字段分发表 ==========


@dataclass(frozen=True)
class FieldHandler:
    """单个字段的处理器.

    Attributes:
        convert: 取值转换函数，参数为 (字段名, 原始值)
        apply: 将转换后的值写入构建器
    """

    convert: Callable[[str, Any], Any]
    apply: Callable[[GeoQueryContextBuilder, Any], Any]


# 模块加载时构建，之后只读
GEO_CONTEXT_FIELDS: Mapping[str, FieldHandler] = MappingProxyType(
    {
        CONTEXT_VALUE: FieldHandler(_to_location, _set_location),
        CONTEXT_BOOST: FieldHandler(_to_int, GeoQueryContextBuilder.set_boost),
        CONTEXT_PRECISION: FieldHandler(
            _to_precision, GeoQueryContextBuilder.set_precision
        ),
        CONTEXT_NEIGHBOURS: FieldHandler(
            _to_precision_list, GeoQueryContextBuilder.set_neighbours
        ),
        CONTEXT_LAT: FieldHandler(_to_float, GeoQueryContextBuilder.set_lat),
        CONTEXT_LON: FieldHandler(_to_float, GeoQueryContextBuilder.set_lon),
    }
)


# ========== 解析入口 ==========


def parse_geo_query_context(
    value: Any, default_precision: int = DEFAULT_PRECISION
) -> GeoQueryContext:
    """解析单个地理查询上下文.

    对象按字段顺序依次处理，未识别的字段直接忽略；context 字段的对象形式
    与字符串形式写入同一位置槽位，后出现者生效。无论哪种输入形式，
    最后都会调用 finish() 归一化。

    Args:
        value: JSON 解码后的上下文，应为 dict 或 str
        default_precision: 未指定 precision 时使用的精度

    Returns:
        归一化后的 GeoQueryContext

    Raises:
        MalformedContextError: value 既不是对象也不是字符串时抛出
        MissingLocationError: 没有提供任何位置信息时抛出
        ContextParseError: 字段取值非法时抛出

    Examples:
        >>> parse_geo_query_context("u4pruydqqvj").geohash
        'u4pruydqqvj'
        >>> parse_geo_query_context(42)
        Traceback (most recent call last):
        ...
        geosuggest.exceptions.MalformedContextError: geo context must be an object or string
    """
    builder = GeoQueryContextBuilder(default_precision=default_precision)
    try:
        if isinstance(value, Mapping):
            for field, raw in value.items():
                handler = GEO_CONTEXT_FIELDS.get(field)
                if handler is None:
                    logger.debug(f"忽略未识别的地理上下文字段: {field}")
                    continue
                handler.apply(builder, handler.convert(field, raw))
        elif isinstance(value, str):
            builder.set_geohash(value)
        else:
            raise MalformedContextError("geo context must be an object or string")
        return builder.finish()
    except (GeoError, InvalidQueryContextError) as e:
        raise ContextParseError(f"地理上下文解析失败: {e}") from e


def parse_geo_query_contexts(
    value: Any, default_precision: int = DEFAULT_PRECISION
) -> list[GeoQueryContext]:
    """解析一个或多个地理查询上下文.

    value 为数组时逐个解析，否则视为单个上下文。
    """
    if isinstance(value, (list, tuple)):
        return [parse_geo_query_context(item, default_precision) for item in value]
    return [parse_geo_query_context(value, default_precision)]


def parse_geo_query_context_json(
    text: str | bytes, default_precision: int = DEFAULT_PRECISION
) -> GeoQueryContext:
    """从 JSON 文本解析单个地理查询上下文.

    Raises:
        ContextParseError: JSON 格式错误、字节串不是合法 UTF-8 或上下文非法时抛出
    """
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ContextParseError(f"地理上下文不是合法的 JSON: {e}") from e
    return parse_geo_query_context(value, default_precision)
