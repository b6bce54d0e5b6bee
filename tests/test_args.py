"""Tests for lenient tool-argument decoding."""

from __future__ import annotations

import pytest

from augur.agents.researcher.args import (
    FactArgs,
    FinalizeArgs,
    HypothesisArgs,
    ReadArgs,
    SearchArgs,
)


class TestDecodeInput:
    def test_dict(self) -> None:
        assert FactArgs.decode({"fact": "CPI 2.9%"}).fact == "CPI 2.9%"

    def test_json_string(self) -> None:
        assert FactArgs.decode('{"fact": "CPI 2.9%"}').fact == "CPI 2.9%"

    @pytest.mark.parametrize("raw", [None, "", "not json", "[1, 2]", 42, ["fact"]])
    def test_junk_gives_defaults(self, raw) -> None:
        assert FactArgs.decode(raw).fact == ""

    def test_extra_fields_ignored(self) -> None:
        args = FactArgs.decode({"fact": "x", "source": "y"})
        assert args.fact == "x"

    def test_read_takes_no_arguments(self) -> None:
        assert ReadArgs.decode({"anything": 1}) == ReadArgs()


class TestFieldCoercion:
    def test_numbers_become_text(self) -> None:
        assert FactArgs.decode({"fact": 42}).fact == "42"

    def test_wrong_type_text_is_empty(self) -> None:
        assert FactArgs.decode({"fact": {"nested": True}}).fact == ""

    def test_text_list_from_string(self) -> None:
        args = HypothesisArgs.decode({"position": "yes", "new_evidence": "one item"})
        assert args.new_evidence == ["one item"]

    def test_text_list_drops_blank_and_junk(self) -> None:
        args = HypothesisArgs.decode({"new_evidence": ["a", "", None, {"x": 1}, 3]})
        assert args.new_evidence == ["a", "3"]

    def test_text_list_wrong_type(self) -> None:
        assert HypothesisArgs.decode({"new_counter_evidence": 7}).new_counter_evidence == []

    @pytest.mark.parametrize(
        "raw, expected",
        [
            (65, 65.0),
            ("65", 65.0),
            ("65%", 65.0),
            (150, 100.0),
            (-5, 0.0),
            ("high", 0.0),
            (float("nan"), 0.0),
            (True, 0.0),
            (None, 0.0),
        ],
    )
    def test_confidence_clamped(self, raw, expected) -> None:
        assert HypothesisArgs.decode({"confidence": raw}).confidence == expected

    @pytest.mark.parametrize("raw, expected", [("YES", "yes"), (" no ", "no"), ("maybe", None), (1, None)])
    def test_hypothesis_position(self, raw, expected) -> None:
        assert HypothesisArgs.decode({"position": raw}).position == expected

    def test_search_sources_filtered(self) -> None:
        args = SearchArgs.decode({"query": "q", "sources": ["Twitter", "reddit", "news"]})
        assert args.sources == ["twitter", "news"]


class TestFinalizeArgs:
    def test_verbatim(self) -> None:
        args = FinalizeArgs.decode(
            {
                "recommended_position": "yes",
                "confidence": "high",
                "thesis": "T",
                "edge": "E",
                "key_risks": ["R1"],
                "what_would_flip": "F",
            }
        )
        assert args.recommended_position == "yes"
        assert args.confidence == "high"
        assert args.key_risks == ["R1"]

    def test_missing_fields_default_safely(self) -> None:
        args = FinalizeArgs.decode({})
        assert args.recommended_position == "none"
        assert args.confidence == "low"
        assert args.thesis == ""
        assert args.key_risks == []

    def test_invalid_choices_default(self) -> None:
        args = FinalizeArgs.decode({"recommended_position": "Trump", "confidence": 0.9})
        assert args.recommended_position == "none"
        assert args.confidence == "low"


class TestJsonSchema:
    def test_required_and_properties(self) -> None:
        schema = HypothesisArgs.parameters_json_schema()
        assert schema["type"] == "object"
        assert schema["required"] == ["position", "thesis", "confidence"]
        assert schema["properties"]["position"]["enum"] == ["yes", "no"]
        assert schema["properties"]["confidence"]["maximum"] == 100
        assert "default" not in schema["properties"]["thesis"]

    def test_empty_arguments_schema(self) -> None:
        schema = ReadArgs.parameters_json_schema()
        assert schema["properties"] == {}
        assert schema["required"] == []
