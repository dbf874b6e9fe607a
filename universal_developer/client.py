"""
UniversalLLM - one client, any provider, symbolic commands

Usage:
    llm = UniversalLLM("anthropic", api_key="sk-ant-...")

    text = await llm.generate("/think What are the trade-offs of event sourcing?")
    text = await llm.generate("/loop --iterations=2 Tighten this paragraph: ...")

    # Custom commands
    def transform_eli5(prompt, ctx):
        return {
            "system_prompt": ctx.compose("Explain like I'm five."),
            "user_prompt": prompt,
        }

    llm.register_command("eli5", transform_eli5, description="Simple explanations")
    llm.get_command_usage_stats()   # {"think": 1, "loop": 1}
"""

import asyncio
import logging
from collections import Counter
from collections.abc import Callable, Iterable, Mapping
from enum import Enum
from typing import Any

from .adapters import ClaudeAdapter, ModelAdapter, OpenAIAdapter, QwenAdapter
from .commands import ParameterDeclaration, SymbolicCommand
from .config import Settings, get_settings, normalize_provider
from .errors import UnsupportedProviderError
from .telemetry import DEFAULT_ENDPOINT, TelemetryClient

logger = logging.getLogger(__name__)


class Provider(str, Enum):
    """Supported providers"""

    ANTHROPIC = "anthropic"
    OPENAI = "openai"
    QWEN = "qwen"


ADAPTERS: dict[Provider, type[ModelAdapter]] = {
    Provider.ANTHROPIC: ClaudeAdapter,
    Provider.OPENAI: OpenAIAdapter,
    Provider.QWEN: QwenAdapter,
}


def create_adapter(provider: str | Provider, api_key: str = "", **options: Any) -> ModelAdapter:
    """
    Instantiate the adapter for a provider identifier

    Raises:
        UnsupportedProviderError: no adapter for the identifier
    """
    if isinstance(provider, Provider):
        provider_enum = provider
    else:
        try:
            provider_enum = Provider(normalize_provider(provider))
        except (ValueError, AttributeError):
            raise UnsupportedProviderError(str(provider)) from None

    adapter_class = ADAPTERS[provider_enum]
    return adapter_class(api_key, **options)


class UniversalLLM:
    """Facade binding one provider adapter, usage counters and telemetry"""

    def __init__(
        self,
        provider: str | Provider,
        api_key: str = "",
        *,
        model: str | None = None,
        base_url: str | None = None,
        temperature: float | None = None,
        max_tokens: int | None = None,
        timeout: float | None = 60.0,
        telemetry_enabled: bool = True,
        telemetry_endpoint: str | None = DEFAULT_ENDPOINT,
        anonymous_id: str | None = None,
        session_id: str | None = None,
    ):
        self.adapter = create_adapter(
            provider,
            api_key,
            model=model,
            base_url=base_url,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
        )
        self.telemetry = TelemetryClient(
            enabled=telemetry_enabled,
            endpoint=telemetry_endpoint,
            anonymous_id=anonymous_id,
            session_id=session_id,
        )
        self._usage: Counter[str] = Counter()

        logger.debug(f"UniversalLLM initialized: {self.adapter!r}")

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> "UniversalLLM":
        """Build a client from environment settings, keyword overrides win"""
        settings = settings or get_settings()
        provider = overrides.pop("provider", None) or settings.provider

        options: dict[str, Any] = {
            "api_key": settings.api_key_for(provider),
            "model": settings.model,
            "base_url": settings.base_url,
            "temperature": settings.temperature,
            "max_tokens": settings.max_tokens,
            "timeout": settings.timeout,
            "telemetry_enabled": settings.telemetry_enabled,
            "telemetry_endpoint": settings.telemetry_endpoint,
        }
        options.update({key: value for key, value in overrides.items() if value is not None})
        return cls(provider, **options)

    @property
    def provider(self) -> str:
        return self.adapter.name

    # -------------------------------------------------------------------------
    # Commands
    # -------------------------------------------------------------------------

    def register_command(
        self,
        name: str,
        transform: Callable[..., Any],
        description: str = "",
        parameters: Iterable[ParameterDeclaration | Mapping[str, Any]] = (),
        aliases: str | Iterable[str] = (),
    ) -> "UniversalLLM":
        """Register or replace a symbolic command (name without the leading /)"""
        self.adapter.register_command(
            SymbolicCommand(
                name=name,
                transform=transform,
                description=description,
                parameters=parameters,
                aliases=aliases,
            )
        )
        return self

    def commands(self) -> list[SymbolicCommand]:
        return list(self.adapter.registry)

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    async def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """
        Generate a response using the configured provider

        The usage counter is incremented before the request is sent, so failed
        requests are still counted.

        Raises:
            ProviderError: the upstream call failed
        """
        token = self.adapter.parser.extract_token(prompt)
        command = self.adapter.registry.resolve_name(token) if token else None
        if command:
            self._usage[command] += 1

        response = await self.adapter.generate(prompt, system_prompt)

        if command and self.telemetry.enabled:
            self.telemetry.track(command, self.provider, len(prompt))

        return response

    def generate_sync(self, prompt: str, system_prompt: str | None = None) -> str:
        """Blocking wrapper for scripts without an event loop"""

        async def _run() -> str:
            try:
                return await self.generate(prompt, system_prompt)
            finally:
                await self.flush_telemetry()

        return asyncio.run(_run())

    # -------------------------------------------------------------------------
    # Usage and telemetry
    # -------------------------------------------------------------------------

    def get_command_usage_stats(self) -> dict[str, int]:
        """Snapshot of command name -> invocation count for this instance"""
        return dict(self._usage)

    def set_telemetry_enabled(self, enabled: bool) -> None:
        self.telemetry.enabled = enabled

    async def flush_telemetry(self, timeout: float = 2.0) -> None:
        await self.telemetry.flush(timeout)
