"""Tests for settings, YAML overlay and model selection."""

from __future__ import annotations

import pytest
import yaml
from pydantic import ValidationError
from pydantic_ai.models.function import FunctionModel

from augur.agents.researcher.models import MarketQuestion
from augur.config import ResearchConfig, Settings
from augur.llm_providers import (
    AnthropicModel,
    describe_model,
    get_model_string,
    resolve_model,
)


class TestSettings:
    def test_research_defaults(self) -> None:
        config = ResearchConfig()
        assert config.max_tool_calls == 15
        assert config.enable_thinking is True
        assert config.thinking_budget == 10000
        assert config.finalize_warning_threshold == 3
        assert config.max_tokens_with_thinking > config.thinking_budget

    def test_thinking_budget_must_fit_max_tokens(self) -> None:
        with pytest.raises(ValidationError, match="thinking_budget"):
            ResearchConfig(thinking_budget=20000)
        with pytest.raises(ValidationError):
            ResearchConfig(thinking_budget=16000, max_tokens_with_thinking=16000)

    def test_thinking_budget_ignored_when_thinking_off(self) -> None:
        config = ResearchConfig(enable_thinking=False, thinking_budget=20000)
        assert config.thinking_budget == 20000

    def test_directories_under_data_dir(self, settings: Settings, tmp_path) -> None:
        assert settings.data_dir == tmp_path.resolve()
        assert settings.scratchpad_dir == tmp_path.resolve() / "scratchpads"
        assert settings.transcript_dir == tmp_path.resolve() / "transcripts"

    def test_nested_env_override(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("RESEARCH__MAX_TOOL_CALLS", "7")
        monkeypatch.setenv("XAI_API_KEY", "xai-test")
        settings = Settings(data_dir=tmp_path)
        assert settings.research.max_tool_calls == 7
        assert settings.xai_api_key == "xai-test"

    def test_yaml_overlay_merges_sections(self, settings: Settings) -> None:
        config_path = settings.data_dir / "config.yaml"
        config_path.write_text(
            yaml.safe_dump({"research": {"max_tool_calls": 9, "model": "sonnet"}, "search": {"max_results": 5}}),
            encoding="utf-8",
        )

        settings.load_yaml_config()

        assert settings.research.max_tool_calls == 9
        assert settings.research.model == "sonnet"
        assert settings.research.thinking_budget == 10000
        assert settings.search.max_results == 5

    def test_missing_yaml_keeps_defaults(self, settings: Settings) -> None:
        settings.load_yaml_config()
        assert settings.research == ResearchConfig()

    def test_invalid_yaml_raises(self, settings: Settings) -> None:
        (settings.data_dir / "config.yaml").write_text("research: [unclosed", encoding="utf-8")
        with pytest.raises(yaml.YAMLError):
            settings.load_yaml_config()

    def test_unknown_section_is_skipped(self, settings: Settings) -> None:
        (settings.data_dir / "config.yaml").write_text(
            yaml.safe_dump({"trading": {"enabled": True}, "search": {"max_results": 3}}),
            encoding="utf-8",
        )
        settings.load_yaml_config()
        assert settings.search.max_results == 3
        assert not hasattr(settings, "trading")


class TestModelSelection:
    def test_aliases(self) -> None:
        assert resolve_model("opus") == "anthropic:claude-opus-4-5"
        assert resolve_model("Sonnet") == "anthropic:claude-sonnet-4-5"

    def test_model_strings_pass_through(self) -> None:
        assert resolve_model("openai:gpt-5") == "openai:gpt-5"

    def test_model_instances_pass_through(self) -> None:
        model = FunctionModel(lambda messages, info: None)
        assert resolve_model(model) is model
        assert describe_model(model) == model.model_name

    def test_model_string(self) -> None:
        assert get_model_string(AnthropicModel.CLAUDE_HAIKU_4_5) == "anthropic:claude-haiku-4-5"


class TestMarketQuestion:
    def test_polymarket_field_names(self) -> None:
        market = MarketQuestion.model_validate(
            {
                "id": "123",
                "question": "Will it rain?",
                "outcomes": '["Yes", "No"]',
                "outcomePrices": '["0.25", "0.75"]',
                "endDate": "2025-06-01",
                "volume": "1000.5",
            }
        )
        assert market.outcomes == ["Yes", "No"]
        assert market.outcome_prices == [0.25, 0.75]
        assert market.end_date == "2025-06-01"
        assert market.volume == 1000.5

    def test_is_immutable(self, market: MarketQuestion) -> None:
        with pytest.raises(ValueError):
            market.question = "changed"


class TestObservability:
    def test_no_token_leaves_tracing_off(self, settings: Settings, monkeypatch) -> None:
        import logfire

        from augur.observability import initialize_logfire

        def fail(**kwargs):
            raise AssertionError("logfire.configure should not run without a token")

        monkeypatch.setattr(logfire, "configure", fail)
        assert initialize_logfire(settings) is False
