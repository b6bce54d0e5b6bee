"""Tool registry and dispatcher for the Researcher agent.

Every handler takes the raw (untrusted) arguments of one tool call plus the
run's dependencies and returns text for the model. Handlers record provenance
for external fetches and turn collaborator failures into text; ``dispatch_tool``
is the last line that keeps any exception from escaping into the loop.
"""

import logging
from typing import Any, Awaitable, Callable

from pydantic_ai.tools import ToolDefinition

from augur.agents.researcher.args import (
    BulkTextArgs,
    FactArgs,
    FinalizeArgs,
    HypothesisArgs,
    NoteArgs,
    ReadArgs,
    SearchArgs,
    SignalArgs,
    ToolArgs,
    TranscriptArgs,
    UncertaintyArgs,
)
from augur.agents.researcher.models import ResearchDependencies
from augur.agents.researcher.prompts import ALREADY_FINALIZED
from augur.agents.researcher.verdict import synthesis_from_verdict, verdict_from_finalize
from augur.services.gemini.client import get_text_metadata
from augur.services.youtube.client import get_transcript_preview
from augur.storage.scratchpad import (
    add_fact,
    add_signal,
    add_uncertainty,
    append_note,
    record_source,
    set_synthesis,
    summarize,
    update_hypothesis,
)

logger = logging.getLogger(__name__)

ToolHandler = Callable[[Any, ResearchDependencies], Awaitable[str]]

# Tool-facing source names to Grok live-search source types
GROK_SOURCES = {"twitter": "x", "web": "web", "news": "news"}


def bound_result(text: str, limit: int) -> str:
    """Cut oversized results to a preview that reports the real size."""
    if len(text) <= limit:
        return text
    meta = get_text_metadata(text)
    return (
        f"{text[:limit]}\n\n"
        f"[Truncated: showing {limit} of {meta.chars:,} chars ({meta.words:,} words). "
        "Use gemini_process to work with the full text.]"
    )


# ============================================================================
# Intelligence tools
# ============================================================================


async def grok_search(raw_args: Any, deps: ResearchDependencies) -> str:
    """Search web, X and news through Grok, falling back to X-only sentiment."""
    args = SearchArgs.decode(raw_args)
    if not args.query.strip():
        return "Search skipped: no query provided."
    if deps.grok_client is None:
        return "Search unavailable: no XAI_API_KEY configured."

    search_query = f"{args.query} (focus: {args.focus})" if args.focus.strip() else args.query
    sources = [GROK_SOURCES[s] for s in args.sources] or None

    try:
        result = await deps.grok_client.research_topic(
            search_query, sources=sources, max_results=deps.search.max_results
        )
    except Exception as primary_error:
        logger.warning(f"Grok search failed, retrying X-only: {primary_error}")
        try:
            fallback = await deps.grok_client.x_sentiment(
                search_query, days_back=deps.search.fallback_days_back
            )
        except Exception as fallback_error:
            logger.error(f"Grok X-only fallback failed: {fallback_error}")
            return f"Search failed: {primary_error}. Try a different query."

        record_source(
            deps.scratchpad,
            "grok",
            query=f"{search_query} (twitter only)",
            summary="X sentiment fallback",
        )
        return bound_result(
            f"Twitter/X sentiment (broad search failed, fell back to X only):\n\n"
            f"{fallback.content}",
            deps.config.preview_chars,
        )

    record_source(
        deps.scratchpad,
        "grok",
        query=search_query,
        summary=f"{len(result.citations)} citations, {result.sources_used} sources used",
    )

    shown = result.citations[: deps.search.max_citations_shown]
    citations = "\n".join(f"- {url}" for url in shown) or "- none returned"
    meta = get_text_metadata(result.content)
    return bound_result(
        f"Search results ({meta.words:,} words, {len(result.citations)} citations):\n\n"
        f"{result.content}\n\nCitations:\n{citations}",
        deps.config.preview_chars,
    )


async def gemini_process(raw_args: Any, deps: ResearchDependencies) -> str:
    """Run an instruction over bulk text with Gemini."""
    args = BulkTextArgs.decode(raw_args)
    if not args.text.strip():
        return "Processing skipped: no text provided."
    if not args.instruction.strip():
        return "Processing skipped: no instruction provided."
    if deps.gemini_client is None:
        return "Text processing unavailable: no GEMINI_API_KEY configured."

    try:
        result = await deps.gemini_client.process(args.text, args.instruction)
    except Exception as e:
        logger.error(f"Gemini processing failed: {e}")
        return f"Text processing failed: {e}"

    record_source(
        deps.scratchpad,
        "gemini",
        query=args.instruction,
        summary=f"Processed {result.input_tokens:,} input tokens",
    )
    return bound_result(
        f"Processed ({result.input_tokens:,} tokens in, {result.output_tokens:,} out):\n\n"
        f"{result.result}",
        deps.config.preview_chars,
    )


async def youtube_transcript(raw_args: Any, deps: ResearchDependencies) -> str:
    """Fetch a YouTube transcript, previewing long ones."""
    args = TranscriptArgs.decode(raw_args)
    if not args.video_id.strip():
        return "Transcript skipped: no video_id provided."
    if deps.transcript_client is None:
        return "Transcripts unavailable: no transcript client configured."

    try:
        transcript = await deps.transcript_client.fetch(args.video_id)
    except Exception as e:
        logger.error(f"Transcript fetch failed for {args.video_id}: {e}")
        return f"Transcript failed: {e}"

    meta = get_text_metadata(transcript.full_text)
    record_source(
        deps.scratchpad,
        "youtube",
        url=transcript.url,
        summary=f"{transcript.title} ({meta.words:,} words)",
    )

    preview = get_transcript_preview(transcript, deps.config.preview_chars)
    lines = [
        f"Title: {transcript.title}",
        f"Channel: {transcript.channel}",
        f"Length: {meta.words:,} words (~{meta.estimated_tokens:,} tokens)",
        "",
        preview,
    ]
    if len(preview) < meta.chars:
        lines += [
            "",
            f"[Preview only: full transcript is {meta.chars:,} chars. "
            "Use gemini_process to work with the full text.]",
        ]
    return "\n".join(lines)


# ============================================================================
# Scratchpad tools
# ============================================================================


async def scratchpad_read(raw_args: Any, deps: ResearchDependencies) -> str:
    """Return the current scratchpad summary."""
    ReadArgs.decode(raw_args)
    return summarize(deps.scratchpad)


async def scratchpad_add_fact(raw_args: Any, deps: ResearchDependencies) -> str:
    """Record a verified fact."""
    args = FactArgs.decode(raw_args)
    if not args.fact.strip():
        return "Nothing recorded: fact was empty."
    add_fact(deps.scratchpad, args.fact)
    return f'Fact recorded: "{args.fact}"'


async def scratchpad_add_signal(raw_args: Any, deps: ResearchDependencies) -> str:
    """Record a sentiment or market signal."""
    args = SignalArgs.decode(raw_args)
    if not args.signal.strip():
        return "Nothing recorded: signal was empty."
    add_signal(deps.scratchpad, args.signal)
    return f'Signal recorded: "{args.signal}"'


async def scratchpad_add_uncertainty(raw_args: Any, deps: ResearchDependencies) -> str:
    """Record an open question or risk."""
    args = UncertaintyArgs.decode(raw_args)
    if not args.uncertainty.strip():
        return "Nothing recorded: uncertainty was empty."
    add_uncertainty(deps.scratchpad, args.uncertainty)
    return f'Uncertainty recorded: "{args.uncertainty}"'


async def scratchpad_note(raw_args: Any, deps: ResearchDependencies) -> str:
    """Record a free-form working note."""
    args = NoteArgs.decode(raw_args)
    if not args.note.strip():
        return "Nothing recorded: note was empty."
    append_note(deps.scratchpad, args.note)
    return "Note recorded."


async def update_hypothesis_tool(raw_args: Any, deps: ResearchDependencies) -> str:
    """Revise the YES or NO hypothesis and merge in new evidence."""
    args = HypothesisArgs.decode(raw_args)
    if args.position is None:
        return "Hypothesis not updated: position must be 'yes' or 'no'."

    hypothesis = update_hypothesis(
        deps.scratchpad,
        args.position,
        args.thesis,
        args.confidence,
        new_evidence=args.new_evidence,
        new_counter_evidence=args.new_counter_evidence,
    )
    return (
        f"Hypothesis {hypothesis.position.upper()} updated: {hypothesis.confidence:g}% "
        f"confidence, {len(hypothesis.evidence)} evidence, "
        f"{len(hypothesis.counter_evidence)} counter-evidence."
    )


async def finalize_research(raw_args: Any, deps: ResearchDependencies) -> str:
    """Capture the final verdict and end the research run."""
    if deps.finalized:
        logger.warning("Ignoring repeated finalize_research call")
        return ALREADY_FINALIZED

    verdict = verdict_from_finalize(FinalizeArgs.decode(raw_args))
    set_synthesis(deps.scratchpad, synthesis_from_verdict(verdict))
    deps.final_verdict = verdict
    deps.finalized = True

    return (
        f"Research finalized. Position: {verdict.recommended_position}, "
        f"Confidence: {verdict.confidence}"
    )


# ============================================================================
# Registry
# ============================================================================

_REGISTRY: list[tuple[str, str, type[ToolArgs], ToolHandler]] = [
    (
        "grok_search",
        "Search X/Twitter, web, and news for real-time information and sentiment. "
        "Best for: current events, public opinion, breaking news, insider chatter.",
        SearchArgs,
        grok_search,
    ),
    (
        "gemini_process",
        "Process large text (transcripts, articles, documents) with a long-context model. "
        "Use for summarizing, extracting key facts, or analyzing lengthy content.",
        BulkTextArgs,
        gemini_process,
    ),
    (
        "youtube_transcript",
        "Fetch the transcript of a YouTube video (interviews, press conferences, "
        "earnings calls). Returns a preview; use gemini_process for the full text.",
        TranscriptArgs,
        youtube_transcript,
    ),
    (
        "scratchpad_read",
        "Read the current state of your research scratchpad "
        "(facts, signals, hypotheses, sources consulted).",
        ReadArgs,
        scratchpad_read,
    ),
    (
        "scratchpad_add_fact",
        "Record a verified fact you've discovered. Facts should be objective and sourced.",
        FactArgs,
        scratchpad_add_fact,
    ),
    (
        "scratchpad_add_signal",
        "Record a signal - something that suggests direction (sentiment shift, "
        "insider hint, pattern).",
        SignalArgs,
        scratchpad_add_signal,
    ),
    (
        "scratchpad_add_uncertainty",
        "Record an uncertainty or open question that could affect the outcome.",
        UncertaintyArgs,
        scratchpad_add_uncertainty,
    ),
    (
        "scratchpad_note",
        "Add a free-form note to your research log "
        "(analysis, observations, todo items).",
        NoteArgs,
        scratchpad_note,
    ),
    (
        "update_hypothesis",
        "Create or update your hypothesis for a position. "
        "Track evidence for and against.",
        HypothesisArgs,
        update_hypothesis_tool,
    ),
    (
        "finalize_research",
        "Finalize your research with a recommendation. Call this when you have enough "
        "information to make a call.",
        FinalizeArgs,
        finalize_research,
    ),
]

TOOL_DEFINITIONS: list[ToolDefinition] = [
    ToolDefinition(
        name=name,
        description=description,
        parameters_json_schema=args_model.parameters_json_schema(),
    )
    for name, description, args_model, _ in _REGISTRY
]

TOOL_HANDLERS: dict[str, ToolHandler] = {name: handler for name, _, _, handler in _REGISTRY}

FINALIZE_TOOL = "finalize_research"


async def dispatch_tool(name: str, raw_args: Any, deps: ResearchDependencies) -> str:
    """Run one tool call and return its text result. Never raises."""
    handler = TOOL_HANDLERS.get(name)
    if handler is None:
        logger.warning(f"Model requested unknown tool: {name}")
        return f"Unknown tool: {name}. Available tools: {', '.join(TOOL_HANDLERS)}"

    try:
        return await handler(raw_args, deps)
    except Exception as e:
        logger.exception(f"Tool {name} raised")
        return f"Tool {name} failed: {e}"
