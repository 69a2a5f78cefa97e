"""GeoSuggest 异常定义模块."""


class GeoSuggestError(Exception):
    """GeoSuggest 基础异常类."""

    pass


class ContextParseError(GeoSuggestError):
    """地理上下文解析异常.

    字段取值类型错误、精度非法等无法归一化的输入均抛出此异常。
    """

    pass


class MissingLocationError(ContextParseError):
    """缺少位置信息异常.

    归一化时既没有 geohash，也没有坐标点，且 lat/lon 未同时提供。
    """

    pass


class MalformedContextError(ContextParseError):
    """地理上下文格式异常（顶层值既不是对象也不是字符串）."""

    pass


class ContextMappingConfigError(GeoSuggestError):
    """上下文映射配置校验异常."""

    pass


class SuggestExecutionError(GeoSuggestError):
    """补全建议请求执行失败异常."""

    pass


class InvalidQueryContextError(GeoSuggestError):
    """查询上下文参数非法异常（精度不是正整数、neighbours 含非整数等）."""

    pass
