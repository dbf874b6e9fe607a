"""
Provider adapters

Supported Providers:
- Anthropic Claude
- OpenAI GPT
- Qwen (native thinking mode)

Quick Start:
    from universal_developer.adapters import QwenAdapter

    adapter = QwenAdapter(api_key="...")
    text = await adapter.generate("/think Why is the sky blue?")
"""

from .base import AdapterConfig, ModelAdapter
from .claude import ClaudeAdapter
from .openai import OpenAIAdapter
from .qwen import QwenAdapter

__all__ = [
    "AdapterConfig",
    "ModelAdapter",
    "ClaudeAdapter",
    "OpenAIAdapter",
    "QwenAdapter",
]
