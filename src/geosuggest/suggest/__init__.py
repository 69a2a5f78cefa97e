"""补全建议器地理上下文模块.

主要功能:
    - GeoQueryContext: 归一化后的地理查询上下文
    - GeoQueryContextBuilder: 逐字段填充、延迟校验的增量构建器
    - parse_geo_query_context: 解析字符串或对象形式的地理上下文
    - GeoContextMapping: 地理上下文映射配置，负责邻居单元展开
    - GeoSuggestTool: 构建并执行带地理上下文的 completion suggest 请求

使用示例:
    from geosuggest.suggest import GeoContextMapping, parse_geo_query_context

    ctx = parse_geo_query_context({"context": {"lat": 43.6624, "lon": -79.3863}, "boost": 2})
    mapping = GeoContextMapping(name="location")
    cells = mapping.to_internal_query_contexts([ctx])
"""

from geosuggest.suggest.mapping import (
    CONTEXT_BOOST,
    CONTEXT_NEIGHBOURS,
    CONTEXT_PRECISION,
    CONTEXT_VALUE,
    DEFAULT_PRECISION,
    GeoContextMapping,
    InternalQueryContext,
)
from geosuggest.suggest.parser import (
    GEO_CONTEXT_FIELDS,
    FieldHandler,
    parse_geo_query_context,
    parse_geo_query_context_json,
    parse_geo_query_contexts,
)
from geosuggest.suggest.query_context import GeoQueryContext, GeoQueryContextBuilder
from geosuggest.suggest.tool import GeoSuggestion, GeoSuggestTool

__all__ = [
    # 核心工具
    "GeoSuggestTool",
    "GeoSuggestion",
    # 查询上下文
    "GeoQueryContext",
    "GeoQueryContextBuilder",
    # 解析
    "GEO_CONTEXT_FIELDS",
    "FieldHandler",
    "parse_geo_query_context",
    "parse_geo_query_contexts",
    "parse_geo_query_context_json",
    # 映射配置
    "GeoContextMapping",
    "InternalQueryContext",
    "DEFAULT_PRECISION",
    "CONTEXT_VALUE",
    "CONTEXT_BOOST",
    "CONTEXT_NEIGHBOURS",
    "CONTEXT_PRECISION",
]
