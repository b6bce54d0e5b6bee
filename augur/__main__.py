"""Augur CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

env_file = Path.cwd() / ".env"
load_dotenv(env_file)

from augur import __version__
from augur.agents.researcher import MarketQuestion, research_market
from augur.config import get_settings

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def _init_logfire() -> None:
    """Initialize Logfire if available, without failing commands."""
    try:
        from augur.observability import initialize_logfire

        initialize_logfire(get_settings())
    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")


def _load_market(path: Path) -> MarketQuestion:
    with open(path, "r", encoding="utf-8") as f:
        return MarketQuestion.model_validate(json.load(f))


def cmd_research(args: argparse.Namespace) -> int:
    """Run the research loop on one market."""
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)
    _init_logfire()

    try:
        market = _load_market(Path(args.market_file))
    except (OSError, ValueError) as e:
        print(f"\n❌ Could not read market file {args.market_file}: {e}\n")
        return 1

    try:
        print("\n=== Agentic Research ===\n")
        print(f"Market: {market.question}")
        print(f"Market ID: {market.id}\n")

        result = asyncio.run(
            research_market(
                market,
                max_tool_calls=args.max_tool_calls,
                enable_thinking=False if args.no_thinking else None,
                thinking_budget=args.thinking_budget,
                model=args.model,
                settings=get_settings(),
            )
        )
        verdict = result.verdict

        print(f"✓ Research {result.state.value}\n")
        print(f"Model: {result.model_name}")
        print(f"Tool calls: {result.tool_calls}/{result.max_tool_calls} ({result.stalled_turns} stalled turns)")
        print(f"Thinking blocks: {result.thinking_blocks}")
        print(f"Verdict source: {verdict.path.value}\n")
        print(f"Position: {verdict.recommended_position.upper()}")
        print(f"Confidence: {verdict.confidence.upper()}")
        print(f"Thesis: {verdict.thesis}")
        print(f"Edge: {verdict.edge}")
        if verdict.key_risks:
            print("Key Risks:")
            for risk in verdict.key_risks:
                print(f"  • {risk}")
        print(f"What Would Flip: {verdict.what_would_flip}\n")

        return 0

    except Exception as e:
        logger.error(f"Research failed: {e}", exc_info=True)
        print(f"\n❌ Research failed: {e}\n")
        return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Display current configuration."""
    try:
        settings = get_settings()
        research = settings.research

        print("\n=== Augur Configuration ===\n")
        print(f"Data Directory: {settings.data_dir}\n")
        print("Research:")
        print(f"  Model: {research.model}")
        print(f"  Max Tool Calls: {research.max_tool_calls}")
        print(f"  Thinking: {research.enable_thinking} (budget: {research.thinking_budget} tokens)")
        print(f"  Finalize Warning At: {research.finalize_warning_threshold} calls left")
        print(f"  Preview Chars: {research.preview_chars:,}")
        print(f"  Persist Scratchpads: {research.persist_scratchpads}")
        print(f"  Save Transcripts: {research.save_transcripts}\n")
        print("Search:")
        print(f"  Max Results: {settings.search.max_results}")
        print(f"  Fallback Window: {settings.search.fallback_days_back} days\n")
        print("API Keys:")
        print(f"  Anthropic: {'✓ Set' if settings.anthropic_api_key else '✗ Not set'}")
        print(f"  xAI (Grok): {'✓ Set' if settings.xai_api_key else '✗ Not set'}")
        print(f"  Gemini: {'✓ Set' if settings.gemini_api_key else '✗ Not set'}")
        print(f"  Logfire: {'✓ Set' if settings.logfire_token else '✗ Not set'}\n")
        return 0

    except ValidationError as e:
        print("\n❌ Configuration Error:\n")
        for error in e.errors():
            print(f"  • {'.'.join(str(x) for x in error['loc'])}: {error['msg']}")
        print()
        return 1
    except Exception as e:
        logger.error(f"Failed to load configuration: {e}")
        print(f"\n❌ Failed to load configuration: {e}\n")
        return 1


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Augur: Agentic research analyst for prediction markets",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"Augur {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    parser_config = subparsers.add_parser(
        "config",
        help="Display current configuration",
    )
    parser_config.set_defaults(func=cmd_config)

    parser_research = subparsers.add_parser(
        "research",
        help="Research one market from a JSON file",
    )
    parser_research.add_argument(
        "market_file",
        help="Path to a market JSON file (Polymarket field names accepted)",
    )
    parser_research.add_argument(
        "--max-tool-calls",
        type=int,
        default=None,
        help="Tool call budget (default from config)",
    )
    parser_research.add_argument(
        "--model",
        default=None,
        help="Model alias (opus, sonnet) or pydantic-ai model string",
    )
    parser_research.add_argument(
        "--no-thinking",
        action="store_true",
        help="Disable extended thinking",
    )
    parser_research.add_argument(
        "--thinking-budget",
        type=int,
        default=None,
        help="Thinking tokens per turn (default from config)",
    )
    parser_research.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    parser_research.set_defaults(func=cmd_research)

    args = parser.parse_args()

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
