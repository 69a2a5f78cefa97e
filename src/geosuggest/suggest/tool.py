"""地理上下文补全建议工具模块.

提供 GeoSuggestTool 类，用于构建带地理上下文的 completion suggest DSL，
通过 Elasticsearch 客户端执行请求并解析建议结果。
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from elasticsearch import Elasticsearch
from elasticsearch.dsl import Search

from geosuggest.exceptions import GeoSuggestError, SuggestExecutionError
from geosuggest.suggest.mapping import DEFAULT_PRECISION
from geosuggest.suggest.parser import parse_geo_query_context
from geosuggest.suggest.query_context import GeoQueryContext

logger = logging.getLogger(__name__)


@dataclass
class GeoSuggestion:
    """补全建议项.

    Attributes:
        text: 建议文本
        score: 建议得分
        contexts: 命中的上下文，{上下文名称: [上下文值, ...]}
        doc_id: 建议所属文档 ID
    """

    text: str
    score: float | None = None
    contexts: dict[str, list[str]] = field(default_factory=dict)
    doc_id: str | None = None


class GeoSuggestTool:
    """地理上下文补全建议工具.

    Attributes:
        es_client: Elasticsearch 客户端实例
        field: completion 类型的字段名
        context_name: 地理上下文在 mapping 中的名称，默认为 "location"
        default_precision: 解析原始上下文时的默认精度

    Examples:
        >>> tool = GeoSuggestTool(es_client, field="suggest")
        >>> tool.build_suggest("place", "tim", ["u4pruy"])
        {'suggest': {'place': {'prefix': 'tim', 'completion': {'field': 'suggest', 'size': 5, 'contexts': {'location': [{'context': {'geohash': 'u4pruy'}, 'boost': 1, 'neighbours': [6], 'precision': 6}]}}}}}
    """

    def __init__(
        self,
        es_client: Elasticsearch,
        field: str,
        context_name: str = "location",
        default_precision: int = DEFAULT_PRECISION,
    ) -> None:
        """初始化 GeoSuggestTool.

        Args:
            es_client: Elasticsearch 客户端实例
            field: completion 类型的字段名
            context_name: 地理上下文名称
            default_precision: 原始上下文未指定 precision 时使用的精度

        Raises:
            ValueError: es_client 为 None 或 field 为空时抛出
        """
        if es_client is None:
            raise ValueError("es_client 不能为 None")
        if not field:
            raise ValueError("field 不能为空")
        self.es_client = es_client
        self.field = field
        self.context_name = context_name
        self.default_precision = default_precision
        logger.info(f"初始化地理补全建议工具，字段: {field}，上下文: {context_name}")

    def _normalize_contexts(self, contexts: Iterable[Any]) -> list[GeoQueryContext]:
        return [
            ctx
            if isinstance(ctx, GeoQueryContext)
            else parse_geo_query_context(ctx, self.default_precision)
            for ctx in contexts
        ]

    def build_suggest(
        self,
        name: str,
        prefix: str,
        contexts: Iterable[Any],
        size: int = 5,
        skip_duplicates: bool = False,
    ) -> dict[str, Any]:
        """构建 completion suggest DSL.

        Args:
            name: 建议器名称
            prefix: 用户输入的前缀
            contexts: 地理上下文，元素可以是 GeoQueryContext，
                     也可以是 geohash 字符串或上下文对象
            size: 返回建议数量，必须为正数
            skip_duplicates: 是否跳过重复建议

        Returns:
            包含 suggest 节点的请求体字典

        Raises:
            ValueError: prefix 为空或 size 不为正数时抛出
            ContextParseError: 原始上下文非法时抛出
        """
        if not prefix:
            raise ValueError("prefix 不能为空")
        if size <= 0:
            raise ValueError(f"size 必须为正数，当前值: {size}")

        completion: dict[str, Any] = {"field": self.field, "size": size}
        if skip_duplicates:
            completion["skip_duplicates"] = True
        geo_contexts = self._normalize_contexts(contexts)
        if geo_contexts:
            completion["contexts"] = {
                self.context_name: [ctx.to_dict() for ctx in geo_contexts]
            }

        search = Search().suggest(name, prefix, completion=completion)
        body = search.to_dict()
        # Search.suggest 把输入写入 text，completion 建议器按 prefix 匹配
        entry = body["suggest"][name]
        body["suggest"][name] = {"prefix": entry.pop("text"), **entry}
        return body

    def suggest(
        self,
        index: str,
        name: str,
        prefix: str,
        contexts: Iterable[Any],
        size: int = 5,
        skip_duplicates: bool = False,
    ) -> list[GeoSuggestion]:
        """执行带地理上下文的补全建议请求.

        Args:
            index: 索引名
            name: 建议器名称
            prefix: 用户输入的前缀
            contexts: 地理上下文，格式同 build_suggest
            size: 返回建议数量
            skip_duplicates: 是否跳过重复建议

        Returns:
            建议项列表

        Raises:
            SuggestExecutionError: 请求执行失败时抛出
        """
        body = self.build_suggest(name, prefix, contexts, size, skip_duplicates)
        body["_source"] = False
        try:
            response = self.es_client.search(index=index, body=body)
        except Exception as e:
            logger.error(f"补全建议请求失败，索引: {index}，错误: {str(e)}")
            raise SuggestExecutionError(f"执行补全建议请求失败: {str(e)}") from e
        return self.parse_suggestions(response, name)

    @staticmethod
    def parse_suggestions(response: Any, name: str) -> list[GeoSuggestion]:
        """解析补全建议结果.

        Args:
            response: ES 原始响应（dict 或 ObjectApiResponse）
            name: 建议器名称

        Returns:
            建议项列表
        """
        if hasattr(response, "body"):
            response = response.body
        if not isinstance(response, dict):
            raise GeoSuggestError(f"无法解析的响应类型: {type(response).__name__}")

        results: list[GeoSuggestion] = []
        for entry in response.get("suggest", {}).get(name, []):
            for option in entry.get("options", []):
                results.append(
                    GeoSuggestion(
                        text=option.get("text", ""),
                        score=option.get("_score", option.get("score")),
                        contexts=dict(option.get("contexts", {})),
                        doc_id=option.get("_id"),
                    )
                )
        return results
