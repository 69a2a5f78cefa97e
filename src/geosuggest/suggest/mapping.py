"""地理上下文映射配置模块.

提供补全建议器地理上下文的映射配置（GeoContextMapping）、
线上格式字段名常量，以及将查询上下文展开为内部匹配单元的逻辑。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from geosuggest.exceptions import ContextMappingConfigError
from geosuggest.geo.geohash import GEOHASH_MAX_PRECISION, adjacent_cells

if TYPE_CHECKING:
    from geosuggest.suggest.query_context import GeoQueryContext

logger = logging.getLogger(__name__)

# 未指定精度时使用的 geohash 层级
DEFAULT_PRECISION = 6

# 线上格式字段名
CONTEXT_VALUE = "context"
CONTEXT_BOOST = "boost"
CONTEXT_PRECISION = "precision"
CONTEXT_NEIGHBOURS = "neighbours"
CONTEXT_LAT = "lat"
CONTEXT_LON = "lon"
GEOHASH_FIELD = "geohash"


@dataclass(frozen=True)
class InternalQueryContext:
    """展开后的单个匹配单元.

    Attributes:
        context: geohash 单元（或单元前缀）
        boost: 相关性权重，沿用所属查询上下文的 boost
        is_prefix: 单元长度小于映射精度时为 True，需按前缀匹配
    """

    context: str
    boost: int
    is_prefix: bool


@dataclass
class GeoContextMapping:
    """地理上下文映射配置.

    对应补全字段 mapping 中一个 type 为 geo 的 context 定义。
    索引时地理位置按 precision 层级编码，查询上下文据此展开。

    Attributes:
        name: 上下文名称，即 mapping 中 contexts 下的 name
        precision: 索引时的 geohash 层级，默认 DEFAULT_PRECISION，范围 [1, 12]
        field_name: 从文档中读取地理位置的字段，默认为空（使用建议输入自带的上下文）

    Raises:
        ContextMappingConfigError: 当配置参数不合法时抛出

    Examples:
        >>> mapping = GeoContextMapping(name="location", precision=4)
        >>> mapping.to_mapping()
        {'name': 'location', 'type': 'geo', 'precision': 4}
    """

    name: str
    precision: int = DEFAULT_PRECISION
    field_name: str | None = None

    def __post_init__(self) -> None:
        """校验映射配置参数合法性."""
        if not self.name:
            raise ContextMappingConfigError("name 不能为空")
        if isinstance(self.precision, bool) or not isinstance(self.precision, int):
            raise ContextMappingConfigError(
                f"precision 必须为整数，当前值: {self.precision!r}"
            )
        if not 1 <= self.precision <= GEOHASH_MAX_PRECISION:
            raise ContextMappingConfigError(
                f"precision 必须在 [1, {GEOHASH_MAX_PRECISION}] 范围内，"
                f"当前值: {self.precision}"
            )

    def to_mapping(self) -> dict[str, object]:
        """输出补全字段 mapping 中的 context 定义."""
        mapping: dict[str, object] = {
            "name": self.name,
            "type": "geo",
            "precision": self.precision,
        }
        if self.field_name:
            mapping["path"] = self.field_name
        return mapping

    def to_internal_query_contexts(
        self, contexts: Iterable[GeoQueryContext]
    ) -> list[InternalQueryContext]:
        """将查询上下文展开为内部匹配单元.

        每个查询上下文先截断到 min(映射精度, 查询精度) 得到基础单元；
        再针对 neighbours 中的每个层级，把基础单元截断到该层级，
        加入该单元及其 8 个相邻单元。neighbours 为空时只保留基础单元。
        多个查询上下文之间不做 boost 合并，结果按输入顺序依次拼接。

        Args:
            contexts: 已归一化的查询上下文

        Returns:
            匹配单元列表，同一查询上下文内去重并按单元排序

        Examples:
            >>> mapping = GeoContextMapping(name="location")
            >>> ctx = GeoQueryContext.from_geohash("u4pruydqqvj")
            >>> len(mapping.to_internal_query_contexts([ctx]))
            9
        """
        results: list[InternalQueryContext] = []
        for query_context in contexts:
            min_precision = min(self.precision, query_context.precision)
            cell = query_context.geohash[:min_precision]

            locations = {cell}
            for neighbour_precision in query_context.neighbours:
                if neighbour_precision < 1:
                    logger.debug(f"忽略非法的 neighbours 层级: {neighbour_precision}")
                    continue
                truncated = cell[: min(neighbour_precision, len(cell))]
                locations.add(truncated)
                locations.update(adjacent_cells(truncated))

            results.extend(
                InternalQueryContext(
                    context=location,
                    boost=query_context.boost,
                    is_prefix=len(location) < self.precision,
                )
                for location in sorted(locations)
            )
        return results
