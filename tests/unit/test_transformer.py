"""
Unit tests for PromptTransformer and its helpers
"""

import pytest

from universal_developer.commands import CommandRegistry, ParameterDeclaration, SymbolicCommand
from universal_developer.parser import CommandParser, ParsedInvocation
from universal_developer.transformer import NormalizedRequest, PromptTransformer, TransformContext


def _summarize(prompt, ctx):
    return {
        "system_prompt": ctx.compose("Summarize in three bullet points."),
        "user_prompt": prompt,
        "model_parameters": {"temperature": 0.3, "bullets": ctx.get_int("bullets", 3)},
    }


async def _shout(prompt, ctx):
    return NormalizedRequest(user_prompt=prompt.upper())


def _broken(prompt, ctx):
    return prompt


@pytest.fixture
def registry():
    registry = CommandRegistry()
    registry.register(
        SymbolicCommand(
            name="summarize",
            transform=_summarize,
            parameters=[ParameterDeclaration("bullets", default=3)],
        )
    )
    registry.register(SymbolicCommand(name="shout", transform=_shout))
    registry.register(SymbolicCommand(name="broken", transform=_broken))
    return registry


@pytest.fixture
def run(registry):
    parser = CommandParser(registry)
    transformer = PromptTransformer(registry)

    async def _run(prompt, system_prompt=None):
        return await transformer.transform(parser.parse(prompt), system_prompt)

    return _run


class TestPromptTransformer:
    """Tests for PromptTransformer.transform"""

    @pytest.mark.asyncio
    async def test_no_command(self, run):
        request = await run("just a question", "Be kind.")

        assert request.user_prompt == "just a question"
        assert request.system_prompt == "Be kind."
        assert request.model_parameters == {}

    @pytest.mark.asyncio
    async def test_empty_system_prompt_is_none(self, run):
        request = await run("just a question", "")
        assert request.system_prompt is None

    @pytest.mark.asyncio
    async def test_mapping_result(self, run):
        request = await run("/summarize --bullets=5 long text", "You are terse.")

        assert request.user_prompt == "long text"
        assert request.system_prompt == "You are terse.\nSummarize in three bullet points."
        assert request.model_parameters == {"temperature": 0.3, "bullets": 5}

    @pytest.mark.asyncio
    async def test_async_transform_awaited(self, run):
        request = await run("/shout hello")
        assert request.user_prompt == "HELLO"

    @pytest.mark.asyncio
    async def test_bad_return_type(self, run):
        with pytest.raises(TypeError):
            await run("/broken hello")

    @pytest.mark.asyncio
    async def test_unresolved_command_in_invocation(self, registry):
        transformer = PromptTransformer(registry)
        invocation = ParsedInvocation(command="gone", clean_prompt="hi")

        request = await transformer.transform(invocation)
        assert request.user_prompt == "hi"


class TestNormalizedRequest:
    """Tests for NormalizedRequest.from_value"""

    def test_passthrough(self):
        request = NormalizedRequest(user_prompt="hi")
        assert NormalizedRequest.from_value(request) is request

    def test_mapping_defaults(self):
        request = NormalizedRequest.from_value({"user_prompt": "hi", "system_prompt": ""})

        assert request.system_prompt is None
        assert request.model_parameters == {}

    def test_mapping_without_user_prompt(self):
        with pytest.raises(TypeError):
            NormalizedRequest.from_value({"system_prompt": "x"})


class TestTransformContext:
    """Tests for TransformContext helpers"""

    def test_compose(self):
        assert TransformContext(system_prompt="Base").compose("Extra") == "Base\nExtra"
        assert TransformContext().compose("Extra") == "Extra"
        assert TransformContext(system_prompt="Base").compose("") == "Base"

    @pytest.mark.parametrize(
        "value,expected",
        [(5, 5), ("7", 7), (0, 3), (-2, 3), ("many", 3), (True, 3), (None, 3)],
    )
    def test_get_int(self, value, expected):
        ctx = TransformContext(parameters={"iterations": value})
        assert ctx.get_int("iterations", 3) == expected

    def test_get_int_absent(self):
        assert TransformContext().get_int("count", 2) == 2
