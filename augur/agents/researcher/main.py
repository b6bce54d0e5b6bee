"""Researcher agent: drives the tool-use loop against the reasoning model.

Each turn sends the full message history plus the tool definitions to the
model, dispatches every tool call in the response, and appends the results.
The run ends when the model calls finalize_research or the tool-call budget is
used up; in the latter case the verdict is derived from the scratchpad.
"""

import logging
import os
import time
from contextlib import AsyncExitStack
from datetime import datetime, timezone

from pydantic_ai.direct import model_request
from pydantic_ai.messages import (
    ModelMessage,
    ModelRequest,
    ModelResponse,
    SystemPromptPart,
    TextPart,
    ThinkingPart,
    ToolCallPart,
    ToolReturnPart,
    UserPromptPart,
)
from pydantic_ai.models import Model, ModelRequestParameters
from pydantic_ai.settings import ModelSettings

from augur.agents.researcher.models import (
    MarketQuestion,
    ResearchDependencies,
    ResearchResult,
    RunState,
    Verdict,
)
from augur.agents.researcher.prompts import (
    BUDGET_EXHAUSTED_RESULT,
    CONTINUE_NUDGE,
    RESEARCHER_SYSTEM_PROMPT,
    build_budget_warning,
    build_market_context,
)
from augur.agents.researcher.tools import TOOL_DEFINITIONS, dispatch_tool
from augur.agents.researcher.verdict import fallback_verdict
from augur.config import ResearchConfig, Settings, get_settings
from augur.llm_providers import describe_model, resolve_model
from augur.services.gemini import GeminiClient
from augur.services.grok import GrokClient
from augur.services.youtube import TranscriptClient
from augur.storage.scratchpad import Scratchpad, load_scratchpad, save_scratchpad
from augur.storage.transcripts import TranscriptRecorder

logger = logging.getLogger(__name__)


class ResearchSession:
    """One research run for one market.

    The session owns the message history and the budget counters. Tools only
    ever see ``deps``; the session only reads ``deps.finalized`` and
    ``deps.final_verdict`` back.
    """

    def __init__(
        self,
        market: MarketQuestion,
        deps: ResearchDependencies,
        model: str | Model,
        transcript: TranscriptRecorder | None = None,
    ):
        self.market = market
        self.deps = deps
        self.model = resolve_model(model)
        self.transcript = transcript or TranscriptRecorder()

        config = deps.config
        self.max_tool_calls = config.max_tool_calls
        self.enable_thinking = config.enable_thinking
        self.thinking_budget = config.thinking_budget
        self.warning_threshold = config.finalize_warning_threshold

        self.state = RunState.RUNNING
        self.messages: list[ModelMessage] = []
        self.tool_calls = 0
        self.stalled_turns = 0
        self.turns = 0
        self.thinking_blocks = 0

    @property
    def model_name(self) -> str:
        return describe_model(self.model)

    @property
    def budget_used(self) -> int:
        return self.tool_calls + self.stalled_turns

    @property
    def remaining(self) -> int:
        return max(self.max_tool_calls - self.budget_used, 0)

    def _model_settings(self) -> ModelSettings:
        config = self.deps.config
        if not self.enable_thinking:
            return {"max_tokens": config.max_tokens}
        return {
            "max_tokens": config.max_tokens_with_thinking,
            "anthropic_thinking": {"type": "enabled", "budget_tokens": self.thinking_budget},
        }

    async def run(self) -> ResearchResult:
        """Run the loop to a terminal state and build the verdict."""
        if self.state is not RunState.RUNNING or self.messages:
            raise RuntimeError("ResearchSession.run() can only be called once")

        context = build_market_context(self.market)
        self.messages.append(
            ModelRequest(
                parts=[
                    SystemPromptPart(content=RESEARCHER_SYSTEM_PROMPT),
                    UserPromptPart(content=context),
                ]
            )
        )
        self.transcript.record("SYSTEM PROMPT", RESEARCHER_SYSTEM_PROMPT)
        self.transcript.record("USER (Market Context)", context)

        logger.info(
            f"Researching {self.market.id} with {self.model_name} "
            f"(budget {self.max_tool_calls}, thinking "
            f"{self.thinking_budget if self.enable_thinking else 'off'})"
        )

        if self.max_tool_calls <= 0:
            self.state = RunState.BUDGET_EXHAUSTED

        while self.state is RunState.RUNNING:
            await self._turn()

        if self.state is RunState.FINALIZED and self.deps.final_verdict is not None:
            verdict = self.deps.final_verdict
        else:
            logger.warning(
                f"Budget exhausted for {self.market.id} without finalize; using fallback verdict"
            )
            verdict = fallback_verdict(self.deps.scratchpad)

        self.transcript.record("FINAL RESULT", render_verdict(verdict))
        logger.info(
            f"Research for {self.market.id} ended {self.state.value} after {self.turns} turns, "
            f"{self.tool_calls} tool calls: {verdict.recommended_position} ({verdict.confidence})"
        )

        return ResearchResult(
            market_id=self.market.id,
            verdict=verdict,
            state=self.state,
            model_name=self.model_name,
            tool_calls=self.tool_calls,
            stalled_turns=self.stalled_turns,
            max_tool_calls=self.max_tool_calls,
            turns=self.turns,
            thinking_blocks=self.thinking_blocks,
            messages=list(self.messages),
            scratchpad=self.deps.scratchpad,
        )

    async def _turn(self) -> None:
        self.turns += 1
        logger.debug(f"Turn {self.turns} ({self.budget_used}/{self.max_tool_calls} budget used)")

        try:
            response: ModelResponse = await model_request(
                self.model,
                self.messages,
                model_settings=self._model_settings(),
                model_request_parameters=ModelRequestParameters(
                    function_tools=TOOL_DEFINITIONS
                ),
            )
        except Exception as e:
            logger.error(f"Reasoning model request failed on turn {self.turns}: {e}")
            raise

        replies: list[ToolReturnPart | UserPromptPart] = []
        invoked = 0

        for part in response.parts:
            if isinstance(part, ThinkingPart):
                self.thinking_blocks += 1
                self.transcript.record("THINKING", part.content)
            elif isinstance(part, TextPart):
                self.transcript.record("ASSISTANT", part.content)
            elif isinstance(part, ToolCallPart):
                invoked += 1
                replies.append(await self._invoke(part))

        self.messages.append(response)

        if self.deps.finalized:
            self.state = RunState.FINALIZED
        else:
            if invoked == 0:
                self.stalled_turns += 1
            if self.budget_used >= self.max_tool_calls:
                self.state = RunState.BUDGET_EXHAUSTED
            else:
                replies.extend(self._nudges(invoked))

        if replies:
            self.messages.append(ModelRequest(parts=replies))

    async def _invoke(self, part: ToolCallPart) -> ToolReturnPart:
        if self.budget_used >= self.max_tool_calls:
            logger.warning(f"Skipping {part.tool_name}: tool call budget exhausted")
            content = BUDGET_EXHAUSTED_RESULT
        else:
            self.tool_calls += 1
            self.transcript.record(
                f"TOOL CALL [{self.tool_calls}/{self.max_tool_calls}]",
                f"{part.tool_name}({part.args_as_json_str()})",
            )
            logger.info(f"Tool call {self.tool_calls}/{self.max_tool_calls}: {part.tool_name}")
            content = await dispatch_tool(part.tool_name, part.args, self.deps)

        preview_chars = self.deps.config.transcript_preview_chars
        self.transcript.record(
            f"TOOL RESULT ({part.tool_name})",
            content if len(content) <= preview_chars else content[:preview_chars] + "\n...",
        )
        return ToolReturnPart(
            tool_name=part.tool_name, content=content, tool_call_id=part.tool_call_id
        )

    def _nudges(self, invoked: int) -> list[UserPromptPart]:
        nudges: list[str] = []
        if invoked == 0:
            nudges.append(CONTINUE_NUDGE)
        if self.remaining <= self.warning_threshold:
            nudges.append(build_budget_warning(self.remaining))
        for nudge in nudges:
            self.transcript.record("USER (nudge)", nudge)
        return [UserPromptPart(content=nudge) for nudge in nudges]


def render_verdict(verdict: Verdict) -> str:
    risks = "\n".join(f"- {risk}" for risk in verdict.key_risks) or "- none recorded"
    return f"""**Recommended Position:** {verdict.recommended_position.upper()}
**Confidence:** {verdict.confidence.upper()}
**Path:** {verdict.path.value}

**Thesis:**
{verdict.thesis}

**Edge:**
{verdict.edge}

**Key Risks:**
{risks}

**What Would Flip:**
{verdict.what_would_flip}
"""


def _setup_api_keys(settings: Settings) -> None:
    """Expose the Anthropic key from settings to pydantic-ai's provider."""
    if settings.anthropic_api_key and not os.environ.get("ANTHROPIC_API_KEY"):
        os.environ["ANTHROPIC_API_KEY"] = settings.anthropic_api_key


def _transcript_header(market: MarketQuestion, result: ResearchResult, config: ResearchConfig) -> str:
    return f"""# Agent Research Transcript

**Market:** {market.question}
**Market ID:** {market.id}
**Model:** {result.model_name}
**Thinking Enabled:** {config.enable_thinking} (budget: {config.thinking_budget} tokens)
**Max Tool Calls:** {result.max_tool_calls}
**Finished:** {datetime.now(timezone.utc).isoformat()}
**Final State:** {result.state.value}
**Tool Calls Used:** {result.tool_calls} ({result.stalled_turns} stalled turns)
**Thinking Blocks:** {result.thinking_blocks}

---
"""


async def research_market(
    market: MarketQuestion,
    max_tool_calls: int | None = None,
    enable_thinking: bool | None = None,
    thinking_budget: int | None = None,
    model: str | Model | None = None,
    settings: Settings | None = None,
    scratchpad: Scratchpad | None = None,
) -> ResearchResult:
    """Research one market end to end and return the full result.

    Arguments left as ``None`` come from ``settings.research``. Collaborator
    clients are only created when their API key is configured; tools whose
    client is missing answer the model with an "unavailable" message.
    """
    settings = settings or get_settings()
    overrides = {
        key: value
        for key, value in {
            "max_tool_calls": max_tool_calls,
            "enable_thinking": enable_thinking,
            "thinking_budget": thinking_budget,
        }.items()
        if value is not None
    }
    # Overrides go through the same checks as configured values
    config = ResearchConfig.model_validate({**settings.research.model_dump(), **overrides})

    _setup_api_keys(settings)
    start_time = time.time()

    if scratchpad is None:
        scratchpad = load_scratchpad(
            market.id,
            market.question,
            settings.scratchpad_dir if config.persist_scratchpads else None,
        )

    async with AsyncExitStack() as stack:
        grok_client = None
        if settings.xai_api_key:
            grok_client = await stack.enter_async_context(GrokClient(api_key=settings.xai_api_key))
        gemini_client = None
        if settings.gemini_api_key:
            gemini_client = await stack.enter_async_context(
                GeminiClient(api_key=settings.gemini_api_key)
            )
        transcript_client = await stack.enter_async_context(TranscriptClient())

        deps = ResearchDependencies(
            scratchpad=scratchpad,
            config=config,
            search=settings.search,
            grok_client=grok_client,
            gemini_client=gemini_client,
            transcript_client=transcript_client,
        )
        session = ResearchSession(market, deps, model or config.model)
        result = await session.run()

    # The verdict is already decided; a failed write must not lose it
    if config.persist_scratchpads:
        try:
            save_scratchpad(result.scratchpad, settings.scratchpad_dir)
        except OSError as e:
            logger.error(f"Failed to save scratchpad for {market.id}: {e}")
    if config.save_transcripts:
        try:
            session.transcript.save(
                settings.transcript_dir,
                market.id,
                header=_transcript_header(market, result, config),
            )
        except OSError as e:
            logger.error(f"Failed to save transcript for {market.id}: {e}")

    logger.info(f"Research for {market.id} completed in {time.time() - start_time:.1f}s")
    return result


async def run_research(
    market: MarketQuestion,
    max_tool_calls: int | None = None,
    enable_thinking: bool | None = None,
    thinking_budget: int | None = None,
    model: str | Model | None = None,
    settings: Settings | None = None,
) -> Verdict:
    """Research one market and return only the verdict."""
    result = await research_market(
        market,
        max_tool_calls=max_tool_calls,
        enable_thinking=enable_thinking,
        thinking_budget=thinking_budget,
        model=model,
        settings=settings,
    )
    return result.verdict
