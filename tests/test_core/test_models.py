"""
Tests for the core data models.
"""
import pytest
from pydantic import TypeAdapter, ValidationError

from core.models import (
    CostBreakdown,
    FinishEvent,
    Message,
    Metadata,
    ReasoningPart,
    SearchResults,
    Source,
    StreamEvent,
    TextPart,
    ToolCallEvent,
    ToolError,
    ToolPart,
    gen_id,
    parse_tool_result,
)

stream_event_adapter = TypeAdapter(StreamEvent)


class TestParts:
    """Test the discriminated part union."""

    def test_message_parses_parts_by_type(self):
        message = Message.model_validate(
            {
                "id": "m1",
                "role": "assistant",
                "parts": [
                    {"type": "reasoning", "text": "thinking", "state": "done"},
                    {
                        "type": "tool",
                        "toolName": "search",
                        "toolCallId": "call-1",
                        "state": "output-available",
                        "output": {"results": [{"url": "https://a.com", "title": "A"}]},
                    },
                    {"type": "text", "text": "Answer"},
                ],
            }
        )

        assert isinstance(message.parts[0], ReasoningPart)
        assert isinstance(message.parts[1], ToolPart)
        assert isinstance(message.parts[1].output, SearchResults)
        assert isinstance(message.parts[2], TextPart)

    def test_tool_part_error_output(self):
        part = ToolPart.model_validate(
            {
                "toolName": "extract",
                "toolCallId": "call-2",
                "state": "output-error",
                "output": {"error": True, "message": "Rate limited"},
                "errorText": "Rate limited",
            }
        )

        assert isinstance(part.output, ToolError)
        assert part.output.message == "Rate limited"

    def test_unknown_part_type_rejected(self):
        with pytest.raises(ValidationError):
            Message.model_validate(
                {"id": "m1", "role": "user", "parts": [{"type": "image", "url": "x"}]}
            )

    def test_unknown_tool_name_rejected(self):
        with pytest.raises(ValidationError):
            ToolPart(toolName="browse", toolCallId="c1")


class TestMetadata:
    """Test cost breakdown and metadata validation."""

    def test_cost_breakdown_total_is_sum(self):
        cost = CostBreakdown.of(0.5, 0.25, 0.125)

        assert cost.total == pytest.approx(0.875)

    def test_negative_cost_rejected(self):
        with pytest.raises(ValidationError):
            CostBreakdown(model=-1.0)

    def test_negative_tokens_rejected(self):
        with pytest.raises(ValidationError):
            Metadata(
                inputTokens=-1,
                outputTokens=0,
                costBreakdown=CostBreakdown(),
                model="m",
                tokensPerSecond=0,
                timeToFirstTokenMs=0,
            )

    def test_source_from_url_uses_url_as_id(self):
        source = Source.from_url("https://example.com/a", "Example")

        assert source.id == "https://example.com/a"
        assert source.sourceType == "url"
        assert source.title == "Example"


class TestParseToolResult:
    """Test validation of raw tool outputs."""

    def test_search_results(self):
        result = parse_tool_result({"results": [{"url": "https://a.com", "title": "A"}]})

        assert isinstance(result, SearchResults)
        assert result.results[0].url == "https://a.com"

    def test_error_result(self):
        result = parse_tool_result({"error": True, "message": "Search timed out"})

        assert isinstance(result, ToolError)
        assert result.message == "Search timed out"

    def test_error_without_message(self):
        result = parse_tool_result({"error": True})

        assert isinstance(result, ToolError)
        assert result.message == "Tool failed"

    @pytest.mark.parametrize(
        "raw",
        [None, "text output", 42, [], {}, {"results": "nope"}, {"error": "yes"}],
    )
    def test_malformed_output(self, raw):
        result = parse_tool_result(raw)

        assert isinstance(result, ToolError)
        assert result.message == "Malformed tool output"

    def test_model_instance_passthrough(self):
        error = ToolError(message="boom")

        assert parse_tool_result(error) is error


class TestStreamEvents:
    """Test the wire event union."""

    def test_parse_by_type(self):
        event = stream_event_adapter.validate_python(
            {"type": "tool-call", "toolCallId": "c1", "toolName": "search", "input": {"objective": "x"}}
        )

        assert isinstance(event, ToolCallEvent)
        assert event.providerExecuted is False

    def test_finish_defaults(self):
        event = stream_event_adapter.validate_python({"type": "finish"})

        assert isinstance(event, FinishEvent)
        assert event.inputTokens == 0
        assert event.outputTokens == 0

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            stream_event_adapter.validate_python({"type": "raw", "value": 1})


class TestGenId:
    def test_prefix_and_uniqueness(self):
        ids = {gen_id("msg_") for _ in range(100)}

        assert len(ids) == 100
        assert all(i.startswith("msg_") for i in ids)
