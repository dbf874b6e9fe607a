"""
Qwen adapter

Qwen3 models expose a native reasoning switch: the ``enable_thinking`` body
field plus ``/think`` and ``/no_think`` markers at the end of the user turn.
``think`` uses the switch instead of system-prompt engineering.
"""

from typing import Any, Dict

from ..transformer import NormalizedRequest, TransformContext
from .base import ModelAdapter

THINK_MARKER = "/think"
NO_THINK_MARKER = "/no_think"


def with_marker(prompt: str, marker: str) -> str:
    """Append a reasoning marker unless the prompt already ends with it"""
    if prompt.rstrip().endswith(marker):
        return prompt
    return f"{prompt} {marker}" if prompt else marker


class QwenAdapter(ModelAdapter):
    """Qwen OpenAI-compatible provider"""

    name = "qwen"

    DEFAULT_BASE_URL = "https://api.qwen.ai"
    DEFAULT_MODEL = "qwen3-30b-a3b"

    PASSTHROUGH_PARAMETERS = ("enable_thinking", "top_p", "top_k", "stop")

    def transform_think(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        return NormalizedRequest(
            system_prompt=ctx.system_prompt or None,
            user_prompt=with_marker(prompt, THINK_MARKER),
            model_parameters={
                "temperature": self.lower_temperature(0.2),
                "enable_thinking": True,
            },
        )

    def transform_fast(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "Provide brief, direct responses. Focus on essential information only."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=with_marker(prompt, NO_THINK_MARKER),
            model_parameters={
                "temperature": self.raise_temperature(0.1),
                "max_tokens": self.fast_max_tokens,
                "enable_thinking": False,
            },
        )

    def transform_loop(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        iterations = ctx.get_int("iterations", 3)
        system_prompt = ctx.compose(
            f"Please use an iterative approach with {iterations} refinement cycles:\n"
            "1. Initial response\n"
            "2. Critical review\n"
            "3. Improvement\n"
            f"4. Repeat steps 2-3 for a total of {iterations} iterations\n"
            "5. Present your final response with all iterations clearly labeled"
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.config.temperature,
                "enable_thinking": True,
            },
        )

    def transform_reflect(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "For this response, please:\n"
            "1. Answer the query directly\n"
            "2. Then reflect on your answer by analyzing:\n"
            "   - Assumptions made\n"
            "   - Alternative perspectives\n"
            "   - Limitations in your approach\n"
            "   - Potential improvements"
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=with_marker(prompt, THINK_MARKER),
            model_parameters={
                "temperature": self.lower_temperature(0.1),
                "enable_thinking": True,
            },
        )

    def transform_collapse(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        return NormalizedRequest(
            system_prompt=ctx.system_prompt or None,
            user_prompt=with_marker(prompt, NO_THINK_MARKER),
            model_parameters={
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
                "enable_thinking": False,
            },
        )

    def transform_fork(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        count = ctx.get_int("count", 2)
        system_prompt = ctx.compose(
            f"Please provide {count} distinct alternative responses to this prompt, "
            "representing different approaches or perspectives. Label each alternative clearly."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.raise_temperature(0.2),
                "max_tokens": self.config.max_tokens,
                "enable_thinking": True,
            },
        )

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/v1/chat/completions"

    def build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def extract_text(self, data: Dict[str, Any]) -> str:
        message = data["choices"][0]["message"]
        content = message["content"]
        if content is None:
            content = ""
        elif not isinstance(content, str):
            raise ValueError(f"unexpected content type: {type(content).__name__}")

        thinking = data.get("thinking_content") or message.get("reasoning_content")
        if thinking:
            return f"<thinking>\n{thinking}\n</thinking>\n\n{content}"
        return content
