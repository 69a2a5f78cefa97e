"""GeoSuggest - Elasticsearch 补全建议器地理上下文工具包.

将 geohash 字符串、经纬度或坐标点对象等多种形式的地理上下文
归一化为统一的 GeoQueryContext，并展开为索引匹配使用的 geohash 单元。

主要功能:
    - parse_geo_query_context: 解析地理查询上下文
    - GeoQueryContext: 归一化后的地理查询上下文
    - GeoContextMapping: 地理上下文映射配置与邻居展开
    - GeoSuggestTool: 带地理上下文的补全建议请求

使用示例:
    from geosuggest import parse_geo_query_context

    ctx = parse_geo_query_context("u4pruydqqvj")
    ctx.to_dict()
"""

__version__ = "0.1.0"

# 导出地理基础模型
from geosuggest.geo import GeoDistanceUnit, GeoPoint

# 导出异常
from geosuggest.exceptions import (
    ContextMappingConfigError,
    ContextParseError,
    GeoSuggestError,
    InvalidQueryContextError,
    MalformedContextError,
    MissingLocationError,
    SuggestExecutionError,
)

# 导出地理上下文组件
from geosuggest.suggest import (
    DEFAULT_PRECISION,
    GeoContextMapping,
    GeoQueryContext,
    GeoQueryContextBuilder,
    GeoSuggestion,
    GeoSuggestTool,
    InternalQueryContext,
    parse_geo_query_context,
    parse_geo_query_context_json,
    parse_geo_query_contexts,
)

__all__ = [
    # 版本
    "__version__",
    # 地理基础模型
    "GeoPoint",
    "GeoDistanceUnit",
    # 地理上下文
    "DEFAULT_PRECISION",
    "GeoQueryContext",
    "GeoQueryContextBuilder",
    "GeoContextMapping",
    "InternalQueryContext",
    "parse_geo_query_context",
    "parse_geo_query_contexts",
    "parse_geo_query_context_json",
    # 补全建议
    "GeoSuggestTool",
    "GeoSuggestion",
    # 异常
    "GeoSuggestError",
    "ContextParseError",
    "MissingLocationError",
    "MalformedContextError",
    "InvalidQueryContextError",
    "ContextMappingConfigError",
    "SuggestExecutionError",
]
