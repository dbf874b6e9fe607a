"""
Unit tests for the command parser
"""

import logging

import pytest

from universal_developer.adapters import OpenAIAdapter
from universal_developer.commands import ParameterDeclaration, SymbolicCommand
from universal_developer.parser import CommandParser


def _noop(prompt, ctx):
    return {"user_prompt": prompt}


@pytest.fixture
def parser():
    """Parser over the built-in commands plus one custom command"""
    adapter = OpenAIAdapter("test-api-key")
    adapter.register_command(
        SymbolicCommand(
            name="translate",
            aliases=("tr",),
            parameters=(
                ParameterDeclaration("target", "Target language", required=True),
                ParameterDeclaration("formal", "Formal register", default=False),
            ),
            transform=_noop,
        )
    )
    return CommandParser(adapter.registry)


class TestCommandRecognition:
    """Leading token detection"""

    def test_think(self, parser):
        result = parser.parse("/think hello world")

        assert result.command == "think"
        assert result.clean_prompt == "hello world"
        assert result.parameters == {}
        assert result.matched

    def test_unknown_command_passes_through(self, parser):
        prompt = "/unknowncmd hi"
        result = parser.parse(prompt)

        assert result.command is None
        assert result.clean_prompt == prompt
        assert result.parameters == {}

    def test_no_marker(self, parser):
        prompt = "think about --iterations=5 things"
        result = parser.parse(prompt)

        assert result.command is None
        assert result.clean_prompt == prompt
        assert not result.matched

    def test_marker_must_lead(self, parser):
        prompt = "  /think hello"
        assert parser.parse(prompt).command is None

    def test_alias_resolves_to_name(self, parser):
        result = parser.parse("/tr --target=fr good morning")

        assert result.command == "translate"
        assert result.parameters["target"] == "fr"

    def test_command_only(self, parser):
        result = parser.parse("/collapse")

        assert result.command == "collapse"
        assert result.clean_prompt == ""

    def test_extract_token_ignores_registry(self, parser):
        assert parser.extract_token("/unknowncmd hi") == "unknowncmd"
        assert parser.extract_token("hi") is None

    @pytest.mark.parametrize(
        "prompt",
        ["/fast-track my visa application", "/think.", "/think, then answer", "/loop/fork hi"],
    )
    def test_token_must_end_at_whitespace(self, parser, prompt):
        result = parser.parse(prompt)

        assert result.command is None
        assert result.clean_prompt == prompt
        assert parser.extract_token(prompt) is None

    def test_token_followed_by_newline(self, parser):
        result = parser.parse("/think\nsecond line")

        assert result.command == "think"
        assert result.clean_prompt == "second line"

    def test_internal_spacing_kept_without_parameters(self, parser):
        assert parser.parse("/think  hello   world").clean_prompt == "hello   world"


class TestParameters:
    """Inline --name=value parsing"""

    def test_loop_iterations(self, parser):
        result = parser.parse("/loop --iterations=5 improve this")

        assert result.command == "loop"
        assert result.parameters == {"iterations": 5}
        assert result.clean_prompt == "improve this"
        assert result.remainder == "--iterations=5 improve this"

    def test_default_applied(self, parser):
        assert parser.parse("/loop improve this").parameters == {"iterations": 3}
        assert parser.parse("/fork name it").parameters == {"count": 2}

    def test_parameters_anywhere_on_first_line(self, parser):
        result = parser.parse("/fork give me names --count=4 for a cat")

        assert result.parameters == {"count": 4}
        assert result.clean_prompt == "give me names for a cat"

    def test_later_duplicate_wins(self, parser):
        result = parser.parse("/loop --iterations=2 --iterations=4 go")
        assert result.parameters["iterations"] == 4

    def test_bare_flag_is_true(self, parser):
        result = parser.parse("/think --verbose why")

        assert result.parameters == {"verbose": True}
        assert result.clean_prompt == "why"

    def test_bool_parameter_coerced(self, parser):
        result = parser.parse("/translate --target=de --formal hello")
        assert result.parameters == {"target": "de", "formal": True}

        result = parser.parse("/translate --target=de --formal=false hello")
        assert result.parameters["formal"] is False

    def test_undeclared_parameter_captured(self, parser):
        result = parser.parse("/loop --style=terse tighten")
        assert result.parameters == {"iterations": 3, "style": "terse"}

    def test_invalid_value_falls_back_to_default(self, parser, caplog):
        with caplog.at_level(logging.WARNING, logger="universal_developer.parser"):
            result = parser.parse("/fork --count=lots ideas")

        assert result.parameters == {"count": 2}
        assert "count" in caplog.text

    def test_only_first_line_scanned(self, parser):
        result = parser.parse("/loop --iterations=2 first line\nsecond --iterations=9 line")

        assert result.parameters == {"iterations": 2}
        assert result.clean_prompt == "first line\nsecond --iterations=9 line"

    def test_embedded_dashes_are_text(self, parser):
        result = parser.parse("/think compare a--b and x--y")

        assert result.parameters == {}
        assert result.clean_prompt == "compare a--b and x--y"

    def test_missing_required_reported(self, parser, caplog):
        with caplog.at_level(logging.WARNING, logger="universal_developer.parser"):
            result = parser.parse("/translate hello")

        assert result.command == "translate"
        assert result.missing == ["target"]
        assert "target" not in result.parameters
        assert "target" in caplog.text


class TestChaining:
    """Only the first token is structural"""

    def test_second_token_stays_in_prompt(self, parser):
        result = parser.parse("/think /loop hi")

        assert result.command == "think"
        assert result.parameters == {}
        assert result.clean_prompt == "/loop hi"

    def test_parameters_bind_to_first_command(self, parser):
        result = parser.parse("/think /loop --iterations=2 hi")

        # Undeclared for /think, so kept as the raw text
        assert result.parameters == {"iterations": "2"}
        assert result.clean_prompt == "/loop hi"

    def test_unknown_first_token_stops_parsing(self, parser):
        prompt = "/nope /think hi"
        result = parser.parse(prompt)

        assert result.command is None
        assert result.clean_prompt == prompt
