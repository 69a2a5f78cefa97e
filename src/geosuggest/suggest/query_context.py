"""地理查询上下文模块.

提供补全建议器地理查询上下文（GeoQueryContext）及其增量构建器（GeoQueryContextBuilder）。

GeoQueryContext 是归一化后的规范结果：geohash、boost、precision 和 neighbours。
无论输入是 geohash 字符串、坐标点还是单独的 lat/lon，都会在 finish() 时
收敛为同一个 geohash。
"""

from __future__ import annotations

import json
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from geosuggest.exceptions import InvalidQueryContextError, MissingLocationError
from geosuggest.geo.geohash import validate_geohash
from geosuggest.geo.models import GeoPoint
from geosuggest.suggest.mapping import (
    CONTEXT_BOOST,
    CONTEXT_NEIGHBOURS,
    CONTEXT_PRECISION,
    CONTEXT_VALUE,
    DEFAULT_PRECISION,
    GEOHASH_FIELD,
)

logger = logging.getLogger(__name__)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass(frozen=True)
class GeoQueryContext:
    """地理查询上下文.

    归一化后不可变。推荐通过 from_point / from_geohash 构造，
    或者由 parse_geo_query_context 从请求体解析得到。

    Attributes:
        geohash: 规范化后的 geohash，不能为空
        boost: 相关性权重，默认 1，不限制取值范围
        precision: 匹配使用的 geohash 层级，默认 DEFAULT_PRECISION，必须为正整数
        neighbours: 需要同时匹配的 geohash 层级；为 None 时取 (precision,)，
                    显式传入空序列时保持为空

    Raises:
        InvalidGeohashError: geohash 非法时抛出
        InvalidQueryContextError: boost / precision / neighbours 类型或取值非法时抛出

    Examples:
        >>> ctx = GeoQueryContext.from_geohash("u4pruydqqvj", boost=2)
        >>> ctx.to_dict()
        {'context': {'geohash': 'u4pruydqqvj'}, 'boost': 2, 'neighbours': [6], 'precision': 6}
    """

    geohash: str
    boost: int = 1
    precision: int = DEFAULT_PRECISION
    neighbours: tuple[int, ...] | None = None

    def __post_init__(self) -> None:
        """校验并补全字段."""
        validate_geohash(self.geohash)
        if not _is_int(self.boost):
            raise InvalidQueryContextError(f"boost 必须为整数，当前值: {self.boost!r}")
        if not _is_int(self.precision) or self.precision < 1:
            raise InvalidQueryContextError(
                f"precision 必须为正整数，当前值: {self.precision!r}"
            )
        if self.boost <= 0:
            logger.debug(f"地理上下文 {self.geohash} 的 boost 不为正数: {self.boost}")

        if self.neighbours is None:
            neighbours: tuple[int, ...] = (self.precision,)
        else:
            neighbours = tuple(self.neighbours)
            invalid = [n for n in neighbours if not _is_int(n)]
            if invalid:
                raise InvalidQueryContextError(
                    f"neighbours 只能包含整数，非法值: {invalid!r}"
                )
        # frozen dataclass 只能通过 object.__setattr__ 补全
        object.__setattr__(self, "neighbours", neighbours)

    # ========== 构造方法 ==========

    @classmethod
    def from_point(
        cls,
        point: GeoPoint,
        boost: int = 1,
        precision: int = DEFAULT_PRECISION,
        neighbours: Sequence[int] | None = None,
    ) -> GeoQueryContext:
        """以坐标点构造查询上下文，geohash 取坐标点的 12 位编码."""
        return (
            GeoQueryContextBuilder()
            .set_point(point)
            .set_boost(boost)
            .set_precision(precision)
            .set_neighbours(neighbours)
            .finish()
        )

    @classmethod
    def from_geohash(
        cls,
        geohash: str,
        boost: int = 1,
        precision: int = DEFAULT_PRECISION,
        neighbours: Sequence[int] | None = None,
    ) -> GeoQueryContext:
        """以 geohash 构造查询上下文，geohash 原样保留."""
        return (
            GeoQueryContextBuilder()
            .set_geohash(geohash)
            .set_boost(boost)
            .set_precision(precision)
            .set_neighbours(neighbours)
            .finish()
        )

    @classmethod
    def from_lat_lon(
        cls,
        lat: float,
        lon: float,
        boost: int = 1,
        precision: int = DEFAULT_PRECISION,
        neighbours: Sequence[int] | None = None,
    ) -> GeoQueryContext:
        """以经纬度构造查询上下文，等价于 from_point(GeoPoint(lat, lon))."""
        return (
            GeoQueryContextBuilder()
            .set_lat(lat)
            .set_lon(lon)
            .set_boost(boost)
            .set_precision(precision)
            .set_neighbours(neighbours)
            .finish()
        )

    # ========== 序列化 ==========

    def to_point(self) -> GeoPoint:
        """返回 geohash 单元中心点."""
        return GeoPoint.from_geohash(self.geohash)

    def to_dict(self) -> dict[str, Any]:
        """转换为补全建议请求中 contexts 的元素格式.

        字段顺序固定为 context、boost、neighbours、precision。
        """
        return {
            CONTEXT_VALUE: {GEOHASH_FIELD: self.geohash},
            CONTEXT_BOOST: self.boost,
            CONTEXT_NEIGHBOURS: list(self.neighbours or ()),
            CONTEXT_PRECISION: self.precision,
        }

    def to_json(self) -> str:
        """转换为 JSON 字符串."""
        return json.dumps(self.to_dict())


class GeoQueryContextBuilder:
    """地理查询上下文增量构建器.

    解析请求体时按字段逐个调用 setter，setter 之间不做交叉校验，
    所有校验和推导都延迟到 finish()。set_point 与 set_geohash 写入同一位置槽位，
    后调用者覆盖先调用者。所有 setter 都返回 self，支持链式调用。

    Examples:
        >>> builder = GeoQueryContextBuilder().set_lat(40.0).set_lon(-70.0)
        >>> builder = builder.set_precision(3)
        >>> ctx = builder.finish()
        >>> ctx.neighbours
        (3,)
    """

    def __init__(self, default_precision: int = DEFAULT_PRECISION) -> None:
        """初始化构建器.

        Args:
            default_precision: 未调用 set_precision 时使用的精度
        """
        self.boost: int = 1
        self.precision: int = default_precision
        self.neighbours: list[int] | None = None
        self.point: GeoPoint | None = None
        self.geohash: str | None = None
        self.lat: float = math.nan
        self.lon: float = math.nan

    def set_boost(self, boost: int) -> GeoQueryContextBuilder:
        self.boost = boost
        return self

    def set_precision(self, precision: int) -> GeoQueryContextBuilder:
        self.precision = precision
        return self

    def set_neighbours(
        self, neighbours: Sequence[int] | None
    ) -> GeoQueryContextBuilder:
        """设置 neighbours 层级，None 表示未设置（finish 时取默认值）."""
        self.neighbours = None if neighbours is None else list(neighbours)
        return self

    def set_point(self, point: GeoPoint) -> GeoQueryContextBuilder:
        self.point = point
        self.geohash = None
        return self

    def set_geohash(self, geohash: str) -> GeoQueryContextBuilder:
        self.geohash = geohash
        self.point = None
        return self

    def set_lat(self, lat: float) -> GeoQueryContextBuilder:
        self.lat = lat
        return self

    def set_lon(self, lon: float) -> GeoQueryContextBuilder:
        self.lon = lon
        return self

    def finish(self) -> GeoQueryContext:
        """归一化并生成查询上下文.

        位置来源的优先级：坐标点 > geohash 字符串 > lat/lon。
        坐标点按 12 位编码；geohash 字符串原样保留；
        lat 和 lon 必须同时提供才会组成坐标点。

        Returns:
            归一化后的 GeoQueryContext

        Raises:
            MissingLocationError: 没有任何位置来源时抛出
            InvalidGeoPointError: lat/lon 超出合法范围时抛出
            InvalidGeohashError: geohash 非法时抛出
            InvalidQueryContextError: boost / precision / neighbours 非法时抛出
        """
        if self.point is not None:
            geohash = self.point.geohash()
        elif self.geohash is not None:
            geohash = self.geohash
        elif not math.isnan(self.lat) and not math.isnan(self.lon):
            geohash = GeoPoint(lat=self.lat, lon=self.lon).geohash()
        else:
            raise MissingLocationError("no geohash or geo point provided")

        return GeoQueryContext(
            geohash=geohash,
            boost=self.boost,
            precision=self.precision,
            neighbours=None if self.neighbours is None else tuple(self.neighbours),
        )
