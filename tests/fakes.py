"""Collaborator fakes and a scripted reasoning model for tests."""

from __future__ import annotations

from typing import Any

from pydantic_ai.messages import (
    ModelMessage,
    ModelResponse,
    ModelResponsePart,
    TextPart,
    ToolCallPart,
)
from pydantic_ai.models.function import AgentInfo, FunctionModel

from augur.services.gemini import GeminiClient, GeminiResult
from augur.services.grok import GrokClient, GrokSearchResult
from augur.services.youtube import TranscriptClient, TranscriptSegment, VideoTranscript

# ---------------------------------------------------------------------------
# Collaborator fakes
# ---------------------------------------------------------------------------


class FakeGrokClient(GrokClient):
    """Grok client that answers from memory and records its calls."""

    def __init__(
        self,
        content: str = "Polls show a narrow lead for the incumbent.",
        citations: list[str] | None = None,
        research_error: Exception | None = None,
        sentiment_error: Exception | None = None,
    ):
        super().__init__(api_key="test-key")
        self.content = content
        self.citations = citations if citations is not None else ["https://example.com/a"]
        self.research_error = research_error
        self.sentiment_error = sentiment_error
        self.calls: list[tuple[str, Any]] = []

    async def research_topic(self, topic, sources=None, max_results=None):
        self.calls.append(("research_topic", {"topic": topic, "sources": sources}))
        if self.research_error:
            raise self.research_error
        return GrokSearchResult(
            content=self.content, citations=self.citations, sources_used=3, model="grok-4"
        )

    async def x_sentiment(self, topic, days_back=7):
        self.calls.append(("x_sentiment", {"topic": topic, "days_back": days_back}))
        if self.sentiment_error:
            raise self.sentiment_error
        return GrokSearchResult(content="X is bullish.", citations=[], model="grok-4")


class FakeGeminiClient(GeminiClient):
    def __init__(self, result: str = "Key points: A, B.", error: Exception | None = None):
        super().__init__(api_key="test-key")
        self.result = result
        self.error = error

    async def process(self, text, instruction, model=None):
        if self.error:
            raise self.error
        return GeminiResult(
            result=self.result,
            input_tokens=1200,
            output_tokens=80,
            total_tokens=1280,
            model="gemini-2.0-flash",
        )


class FakeTranscriptClient(TranscriptClient):
    def __init__(self, full_text: str = "we expect rates to hold", error: Exception | None = None):
        super().__init__(api=object())
        self.full_text = full_text
        self.error = error

    async def fetch(self, url_or_id):
        if self.error:
            raise self.error
        return VideoTranscript(
            video_id="dQw4w9WgXcQ",
            url="https://youtube.com/watch?v=dQw4w9WgXcQ",
            title="Press conference",
            channel="Fed",
            full_text=self.full_text,
            segments=[TranscriptSegment(text=self.full_text, start=0.0, duration=5.0)],
        )


# ---------------------------------------------------------------------------
# Scripted reasoning model
# ---------------------------------------------------------------------------


def call(tool_name: str, args: Any = None, tool_call_id: str | None = None) -> ToolCallPart:
    """Shorthand for a tool-call part in a scripted response."""
    if tool_call_id is None:
        return ToolCallPart(tool_name=tool_name, args=args if args is not None else {})
    return ToolCallPart(
        tool_name=tool_name, args=args if args is not None else {}, tool_call_id=tool_call_id
    )


class ScriptedModel:
    """Replays one list of response parts per turn, then only speaks."""

    def __init__(self, *turns: list[ModelResponsePart]):
        self.turns = list(turns)
        self.requests: list[list[ModelMessage]] = []
        self.tool_names: list[str] = []
        self.model = FunctionModel(self._respond)

    def _respond(self, messages: list[ModelMessage], info: AgentInfo) -> ModelResponse:
        self.requests.append(list(messages))
        self.tool_names = [tool.name for tool in info.function_tools]
        parts = self.turns.pop(0) if self.turns else [TextPart(content="Let me think about this.")]
        return ModelResponse(parts=parts)


