"""
Prompt Transformer

Turns a parsed invocation into a provider-agnostic NormalizedRequest by
calling the resolved command's transform.

A transform receives the clean prompt and a TransformContext and returns
either a NormalizedRequest or a mapping with the same keys:

    def transform_summarize(prompt, ctx):
        return {
            "system_prompt": ctx.compose("Summarize in three bullet points."),
            "user_prompt": prompt,
            "model_parameters": {"temperature": 0.3},
        }

Transforms must not perform I/O; a coroutine result is awaited so async
callables are still accepted.
"""

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from .commands import CommandRegistry
from .parser import ParsedInvocation

if TYPE_CHECKING:
    from .adapters.base import AdapterConfig

logger = logging.getLogger(__name__)


@dataclass
class NormalizedRequest:
    """Request envelope consumed by ModelAdapter.execute_prompt"""

    user_prompt: str
    system_prompt: str | None = None
    model_parameters: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_value(cls, value: "NormalizedRequest | Mapping[str, Any]") -> "NormalizedRequest":
        if isinstance(value, NormalizedRequest):
            return value
        if not isinstance(value, Mapping) or "user_prompt" not in value:
            raise TypeError(
                f"Transform must return NormalizedRequest or a mapping with 'user_prompt', "
                f"got {type(value).__name__}"
            )
        return cls(
            user_prompt=value["user_prompt"],
            system_prompt=value.get("system_prompt") or None,
            model_parameters=dict(value.get("model_parameters") or {}),
        )


@dataclass
class TransformContext:
    """Everything a transform may read besides the prompt"""

    system_prompt: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)
    config: "AdapterConfig | None" = None

    def compose(self, addendum: str) -> str:
        """Caller's system prompt followed by a command-specific addendum"""
        return "\n".join(part for part in (self.system_prompt, addendum) if part)

    def get_int(self, name: str, fallback: int, minimum: int = 1) -> int:
        """Integer parameter, or fallback when absent, malformed or below minimum"""
        value = self.parameters.get(name, fallback)
        if isinstance(value, bool):
            return fallback
        try:
            value = int(value)
        except (TypeError, ValueError):
            logger.warning(f"Parameter {name}={value!r} is not an integer, using {fallback}")
            return fallback
        return value if value >= minimum else fallback


class PromptTransformer:
    """Apply registered transforms to parsed invocations"""

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    async def transform(
        self,
        invocation: ParsedInvocation,
        system_prompt: str | None = None,
        config: "AdapterConfig | None" = None,
    ) -> NormalizedRequest:
        command = self.registry.resolve(invocation.command) if invocation.command else None

        if command is None:
            return NormalizedRequest(
                user_prompt=invocation.clean_prompt,
                system_prompt=system_prompt or None,
            )

        ctx = TransformContext(
            system_prompt=system_prompt or "",
            parameters=dict(invocation.parameters),
            missing=list(invocation.missing),
            config=config,
        )
        logger.debug(f"Applying /{command.name} with parameters {ctx.parameters}")

        result = command.transform(invocation.clean_prompt, ctx)
        if asyncio.iscoroutine(result):
            result = await result
        return NormalizedRequest.from_value(result)
