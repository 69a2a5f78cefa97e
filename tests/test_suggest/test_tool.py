"""GeoSuggestTool 单元测试."""

from unittest.mock import MagicMock

import pytest

from geosuggest.exceptions import (
    ContextParseError,
    GeoSuggestError,
    SuggestExecutionError,
)
from geosuggest.suggest.query_context import GeoQueryContext
from geosuggest.suggest.tool import GeoSuggestion, GeoSuggestTool


# ============================================================
# 辅助 fixtures
# ============================================================


@pytest.fixture
def es_client() -> MagicMock:
    """创建模拟的 ES 客户端."""
    return MagicMock()


@pytest.fixture
def tool(es_client: MagicMock) -> GeoSuggestTool:
    """创建 GeoSuggestTool."""
    return GeoSuggestTool(es_client, field="suggest")


SUGGEST_RESPONSE = {
    "took": 2,
    "suggest": {
        "place": [
            {
                "text": "tim",
                "offset": 0,
                "length": 3,
                "options": [
                    {
                        "text": "Tim Hortons",
                        "_id": "1",
                        "_score": 2.0,
                        "contexts": {"location": ["u4pruy"]},
                    },
                    {"text": "Timbuktu", "_id": "2", "_score": 1.0},
                ],
            }
        ]
    },
}


class TestGeoSuggestToolInit:
    """GeoSuggestTool 构造函数测试."""

    def test_defaults(self, tool: GeoSuggestTool) -> None:
        """测试默认参数."""
        assert tool.field == "suggest"
        assert tool.context_name == "location"

    def test_none_client_raises(self) -> None:
        """测试 es_client 为 None 时抛出异常."""
        with pytest.raises(ValueError, match="es_client 不能为 None"):
            GeoSuggestTool(None, field="suggest")  # type: ignore[arg-type]

    def test_empty_field_raises(self, es_client: MagicMock) -> None:
        """测试 field 为空时抛出异常."""
        with pytest.raises(ValueError, match="field 不能为空"):
            GeoSuggestTool(es_client, field="")


class TestBuildSuggest:
    """build_suggest 方法测试."""

    def test_with_query_context(self, tool: GeoSuggestTool) -> None:
        """测试传入 GeoQueryContext."""
        ctx = GeoQueryContext.from_geohash("u4pruy", boost=2)
        body = tool.build_suggest("place", "tim", [ctx])
        assert body["suggest"]["place"] == {
            "prefix": "tim",
            "completion": {
                "field": "suggest",
                "size": 5,
                "contexts": {"location": [ctx.to_dict()]},
            },
        }

    def test_text_replaced_by_prefix(self, tool: GeoSuggestTool) -> None:
        """测试 Search.suggest 写入的 text 被替换为 prefix 且位于首位."""
        entry = tool.build_suggest("place", "tim", [])["suggest"]["place"]
        assert "text" not in entry
        assert list(entry) == ["prefix", "completion"]

    def test_with_raw_contexts(self, tool: GeoSuggestTool) -> None:
        """测试传入原始上下文."""
        body = tool.build_suggest("place", "tim", ["u4pruy", {"lat": 40.0, "lon": -70.0, "precision": 3}])
        contexts = body["suggest"]["place"]["completion"]["contexts"]["location"]
        assert contexts[0] == {
            "context": {"geohash": "u4pruy"},
            "boost": 1,
            "neighbours": [6],
            "precision": 6,
        }
        assert contexts[1]["precision"] == 3
        assert contexts[1]["neighbours"] == [3]

    def test_custom_context_name_and_precision(self, es_client: MagicMock) -> None:
        """测试自定义上下文名称和默认精度."""
        tool = GeoSuggestTool(es_client, field="suggest", context_name="pin", default_precision=4)
        body = tool.build_suggest("place", "tim", ["u4pruy"])
        contexts = body["suggest"]["place"]["completion"]["contexts"]
        assert contexts["pin"][0]["precision"] == 4

    def test_without_contexts(self, tool: GeoSuggestTool) -> None:
        """测试不带上下文."""
        body = tool.build_suggest("place", "tim", [])
        assert "contexts" not in body["suggest"]["place"]["completion"]

    def test_skip_duplicates(self, tool: GeoSuggestTool) -> None:
        """测试跳过重复建议."""
        body = tool.build_suggest("place", "tim", [], size=10, skip_duplicates=True)
        completion = body["suggest"]["place"]["completion"]
        assert completion["skip_duplicates"] is True
        assert completion["size"] == 10

    def test_invalid_size_raises(self, tool: GeoSuggestTool) -> None:
        """测试 size 不为正数时抛出异常."""
        with pytest.raises(ValueError, match="size 必须为正数"):
            tool.build_suggest("place", "tim", [], size=0)

    def test_empty_prefix_raises(self, tool: GeoSuggestTool) -> None:
        """测试 prefix 为空时抛出异常."""
        with pytest.raises(ValueError, match="prefix 不能为空"):
            tool.build_suggest("place", "", [])

    def test_invalid_context_raises(self, tool: GeoSuggestTool) -> None:
        """测试非法上下文抛出解析异常."""
        with pytest.raises(ContextParseError):
            tool.build_suggest("place", "tim", [{"boost": 2}])


class TestSuggest:
    """suggest 方法测试."""

    def test_execute(self, tool: GeoSuggestTool, es_client: MagicMock) -> None:
        """测试执行补全建议请求."""
        es_client.search.return_value = SUGGEST_RESPONSE

        results = tool.suggest("places", "place", "tim", ["u4pruy"])

        es_client.search.assert_called_once()
        kwargs = es_client.search.call_args.kwargs
        assert kwargs["index"] == "places"
        assert kwargs["body"]["_source"] is False
        assert kwargs["body"]["suggest"]["place"]["prefix"] == "tim"
        assert results == [
            GeoSuggestion(text="Tim Hortons", score=2.0, contexts={"location": ["u4pruy"]}, doc_id="1"),
            GeoSuggestion(text="Timbuktu", score=1.0, doc_id="2"),
        ]

    def test_client_error_wrapped(self, tool: GeoSuggestTool, es_client: MagicMock) -> None:
        """测试客户端异常被包装."""
        es_client.search.side_effect = ConnectionError("connection refused")
        with pytest.raises(SuggestExecutionError, match="connection refused"):
            tool.suggest("places", "place", "tim", ["u4pruy"])


class TestParseSuggestions:
    """parse_suggestions 方法测试."""

    def test_missing_suggester(self) -> None:
        """测试响应中没有对应建议器."""
        assert GeoSuggestTool.parse_suggestions({"took": 1}, "place") == []

    def test_api_response_body(self) -> None:
        """测试 ObjectApiResponse 形式的响应."""
        response = MagicMock()
        response.body = SUGGEST_RESPONSE
        results = GeoSuggestTool.parse_suggestions(response, "place")
        assert [item.text for item in results] == ["Tim Hortons", "Timbuktu"]

    def test_legacy_score_field(self) -> None:
        """测试兼容 score 字段."""
        response = {"suggest": {"place": [{"options": [{"text": "tim", "score": 0.5}]}]}}
        assert GeoSuggestTool.parse_suggestions(response, "place")[0].score == 0.5

    def test_unknown_response_type(self) -> None:
        """测试无法解析的响应类型."""
        with pytest.raises(GeoSuggestError):
            GeoSuggestTool.parse_suggestions("oops", "place")
