"""
Universal Developer - symbolic runtime commands for any LLM provider

Prefix a prompt with /think, /fast, /loop, /reflect, /collapse or /fork and
the command is translated into the provider's own system prompt and
sampling parameters.

    from universal_developer import UniversalLLM

    llm = UniversalLLM("openai", api_key="sk-...")
    text = await llm.generate("/fork --count=3 Name this library")
"""

__version__ = "0.1.0"

from .adapters import AdapterConfig, ClaudeAdapter, ModelAdapter, OpenAIAdapter, QwenAdapter
from .client import Provider, UniversalLLM, create_adapter
from .commands import CommandRegistry, ParameterDeclaration, SymbolicCommand
from .config import Settings, UserConfig, get_settings
from .errors import ProviderError, UniversalDeveloperError, UnsupportedProviderError
from .parser import CommandParser, ParsedInvocation
from .telemetry import TelemetryClient
from .transformer import NormalizedRequest, PromptTransformer, TransformContext

__all__ = [
    # Client
    "UniversalLLM",
    "Provider",
    "create_adapter",
    # Adapters
    "AdapterConfig",
    "ModelAdapter",
    "ClaudeAdapter",
    "OpenAIAdapter",
    "QwenAdapter",
    # Pipeline
    "CommandRegistry",
    "CommandParser",
    "ParameterDeclaration",
    "ParsedInvocation",
    "SymbolicCommand",
    "NormalizedRequest",
    "PromptTransformer",
    "TransformContext",
    # Telemetry
    "TelemetryClient",
    # Config
    "Settings",
    "UserConfig",
    "get_settings",
    # Errors
    "ProviderError",
    "UniversalDeveloperError",
    "UnsupportedProviderError",
]
