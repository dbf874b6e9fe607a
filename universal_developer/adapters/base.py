"""
Base Provider Adapter

An adapter is the per-provider half of the pipeline: it supplies the six
built-in transforms and performs the single outbound HTTP call. Everything
else (registry, parser, transformer) is shared here.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import httpx

from ..commands import CommandRegistry, ParameterDeclaration, SymbolicCommand
from ..errors import ProviderError
from ..parser import CommandParser, ParsedInvocation
from ..transformer import NormalizedRequest, PromptTransformer, TransformContext

logger = logging.getLogger(__name__)


# =============================================================================
# Configuration
# =============================================================================


@dataclass(frozen=True)
class AdapterConfig:
    """Connection and sampling defaults for one adapter"""

    base_url: str
    model: str
    temperature: float = 0.7
    max_tokens: int = 4096
    api_key: str = field(default="", repr=False)
    timeout: Optional[float] = 60.0

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))
        if self.max_tokens <= 0:
            raise ValueError(f"max_tokens must be positive, got {self.max_tokens}")


# =============================================================================
# Base Adapter
# =============================================================================


class ModelAdapter(ABC):
    """Abstract base class for provider adapters"""

    name: str = "base"

    DEFAULT_BASE_URL: str = ""
    DEFAULT_MODEL: str = ""
    DEFAULT_TEMPERATURE: float = 0.7
    DEFAULT_MAX_TOKENS: int = 4096

    TEMPERATURE_FLOOR: float = 0.1
    TEMPERATURE_CEILING: float = 1.0
    FAST_MAX_TOKENS: int = 1024

    # Model parameters copied verbatim into the request body when present
    PASSTHROUGH_PARAMETERS: Tuple[str, ...] = ()

    def __init__(
        self,
        api_key: str = "",
        *,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        timeout: Optional[float] = 60.0,
    ):
        self.config = AdapterConfig(
            base_url=base_url or self.DEFAULT_BASE_URL,
            model=model or self.DEFAULT_MODEL,
            temperature=self.DEFAULT_TEMPERATURE if temperature is None else temperature,
            max_tokens=max_tokens or self.DEFAULT_MAX_TOKENS,
            api_key=api_key or "",
            timeout=timeout,
        )
        self.registry = CommandRegistry()
        self.parser = CommandParser(self.registry)
        self.transformer = PromptTransformer(self.registry)
        self._register_core_commands()

    def _register_core_commands(self) -> None:
        self.register_command(
            SymbolicCommand(
                name="think",
                description="Activate extended reasoning pathways",
                transform=self.transform_think,
            )
        )
        self.register_command(
            SymbolicCommand(
                name="fast",
                description="Optimize for low-latency responses",
                transform=self.transform_fast,
            )
        )
        self.register_command(
            SymbolicCommand(
                name="loop",
                description="Enable iterative refinement cycles",
                parameters=(
                    ParameterDeclaration(
                        name="iterations",
                        description="Number of refinement iterations",
                        default=3,
                    ),
                ),
                transform=self.transform_loop,
            )
        )
        self.register_command(
            SymbolicCommand(
                name="reflect",
                description="Trigger meta-analysis of outputs",
                transform=self.transform_reflect,
            )
        )
        self.register_command(
            SymbolicCommand(
                name="collapse",
                description="Return to default behavior",
                transform=self.transform_collapse,
            )
        )
        self.register_command(
            SymbolicCommand(
                name="fork",
                description="Generate multiple alternative responses",
                parameters=(
                    ParameterDeclaration(
                        name="count",
                        description="Number of alternatives to generate",
                        default=2,
                    ),
                ),
                transform=self.transform_fork,
            )
        )

    # -------------------------------------------------------------------------
    # Pipeline
    # -------------------------------------------------------------------------

    def register_command(self, command: SymbolicCommand) -> None:
        self.registry.register(command)

    def parse(self, prompt: str) -> ParsedInvocation:
        return self.parser.parse(prompt)

    async def generate(self, prompt: str, system_prompt: Optional[str] = None) -> str:
        """Parse, transform and execute one prompt"""
        invocation = self.parse(prompt)
        request = await self.transformer.transform(invocation, system_prompt, self.config)
        return await self.execute_prompt(request)

    # -------------------------------------------------------------------------
    # Sampling helpers
    # -------------------------------------------------------------------------

    def lower_temperature(self, delta: float) -> float:
        """Default temperature minus delta, clamped to the floor, never above default"""
        current = self.config.temperature
        return min(current, max(self.TEMPERATURE_FLOOR, round(current - delta, 4)))

    def raise_temperature(self, delta: float) -> float:
        """Default temperature plus delta, clamped to the ceiling, never below default"""
        current = self.config.temperature
        return max(current, min(self.TEMPERATURE_CEILING, round(current + delta, 4)))

    @property
    def fast_max_tokens(self) -> int:
        return min(self.config.max_tokens, self.FAST_MAX_TOKENS)

    # -------------------------------------------------------------------------
    # Transforms, one set per provider
    # -------------------------------------------------------------------------

    @abstractmethod
    def transform_think(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """Step-by-step reasoning, lower temperature"""

    @abstractmethod
    def transform_fast(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """Brief answer, capped token budget"""

    @abstractmethod
    def transform_loop(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """Draft, critique and revise ``iterations`` times in one response"""

    @abstractmethod
    def transform_reflect(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """Answer followed by self-critique"""

    @abstractmethod
    def transform_collapse(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """Defaults only, native reasoning disabled"""

    @abstractmethod
    def transform_fork(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        """``count`` labeled alternatives"""

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @property
    @abstractmethod
    def endpoint(self) -> str:
        """Absolute URL of the completion endpoint"""

    @abstractmethod
    def build_headers(self) -> Dict[str, str]:
        """Request headers including authorization"""

    @abstractmethod
    def extract_text(self, data: Dict[str, Any]) -> str:
        """Plain-text completion from a decoded response body"""

    def build_messages(self, request: NormalizedRequest) -> List[Dict[str, str]]:
        messages = []
        if request.system_prompt:
            messages.append({"role": "system", "content": request.system_prompt})
        messages.append({"role": "user", "content": request.user_prompt})
        return messages

    def build_payload(self, request: NormalizedRequest) -> Dict[str, Any]:
        params = request.model_parameters
        max_tokens = params.get("max_tokens")
        temperature = params.get("temperature")

        payload: Dict[str, Any] = {
            "model": self.config.model,
            "messages": self.build_messages(request),
            "max_tokens": self.config.max_tokens if max_tokens is None else max_tokens,
            "temperature": self.config.temperature if temperature is None else temperature,
        }
        for key in self.PASSTHROUGH_PARAMETERS:
            if params.get(key) is not None:
                payload[key] = params[key]
        return payload

    async def execute_prompt(self, request: NormalizedRequest) -> str:
        """Send one request and return the completion text"""
        payload = self.build_payload(request)
        logger.debug(
            f"POST {self.endpoint} model={payload['model']} "
            f"temperature={payload.get('temperature')} max_tokens={payload.get('max_tokens')}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.config.timeout) as client:
                response = await client.post(
                    self.endpoint,
                    headers=self.build_headers(),
                    json=payload,
                )
                response.raise_for_status()
                data = response.json()
            return self.extract_text(data)
        except httpx.HTTPError as e:
            logger.error(f"Error executing {self.name} prompt: {e}")
            raise ProviderError(self.name, str(e)) from e
        except (ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
            logger.error(f"Malformed {self.name} response: {e!r}")
            raise ProviderError(self.name, f"malformed response: {e!r}") from e

    def __repr__(self) -> str:
        return f"{type(self).__name__}(model={self.config.model!r}, base_url={self.config.base_url!r})"
