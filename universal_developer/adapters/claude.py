"""
Anthropic Claude adapter

Claude's Messages API takes the system prompt as a top-level field, not as a
message, and authenticates with ``x-api-key``.
"""

from typing import Any, Dict, List

from ..transformer import NormalizedRequest, TransformContext
from .base import ModelAdapter

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeAdapter(ModelAdapter):
    """Anthropic Claude provider"""

    name = "anthropic"

    DEFAULT_BASE_URL = "https://api.anthropic.com"
    DEFAULT_MODEL = "claude-3-opus-20240229"

    PASSTHROUGH_PARAMETERS = ("top_p", "top_k", "stop_sequences", "thinking")

    def transform_think(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "For this response, I'd like you to engage your deepest analytical capabilities. "
            "Please think step by step through this problem, considering multiple perspectives "
            "and potential approaches. Take your time to develop a comprehensive, nuanced "
            "understanding before providing your final answer."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={"temperature": self.lower_temperature(0.2)},
        )

    def transform_fast(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "Please provide a brief, direct response to this question. Focus on the most "
            "important information and keep your answer concise and to the point."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.raise_temperature(0.1),
                "max_tokens": self.fast_max_tokens,
            },
        )

    def transform_loop(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        iterations = ctx.get_int("iterations", 3)
        system_prompt = ctx.compose(
            "Please approach this task using an iterative process. Follow these steps:\n"
            "\n"
            "1. Develop an initial response to the prompt.\n"
            "2. Critically review your response, identifying areas for improvement.\n"
            "3. Create an improved version based on your critique.\n"
            f"4. Repeat steps 2-3 for a total of {iterations} iterations.\n"
            "5. Present your final response, which should reflect the accumulated improvements.\n"
            "\n"
            "Show all iterations in your response, clearly labeled."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
        )

    def transform_reflect(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "For this response, I'd like you to engage in two distinct phases:\n"
            "\n"
            "1. First, respond to the user's query directly.\n"
            "2. Then, reflect on your own response by considering:\n"
            "   - What assumptions did you make in your answer?\n"
            "   - What perspectives or viewpoints might be underrepresented?\n"
            "   - What limitations exist in your approach or knowledge?\n"
            "   - How might your response be improved or expanded?\n"
            "\n"
            "Clearly separate these two phases in your response."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={"temperature": self.lower_temperature(0.1)},
        )

    def transform_collapse(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        return NormalizedRequest(
            system_prompt=ctx.system_prompt or None,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.config.temperature,
                "max_tokens": self.config.max_tokens,
            },
        )

    def transform_fork(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        count = ctx.get_int("count", 2)
        system_prompt = ctx.compose(
            f"Please provide {count} distinct alternative responses to this prompt. These "
            "alternatives should represent fundamentally different approaches or perspectives, "
            "not minor variations. Label each alternative clearly."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.raise_temperature(0.2),
                "max_tokens": self.config.max_tokens,
            },
        )

    # -------------------------------------------------------------------------
    # Wire format
    # -------------------------------------------------------------------------

    @property
    def endpoint(self) -> str:
        return f"{self.config.base_url}/v1/messages"

    def build_headers(self) -> Dict[str, str]:
        headers = {
            "content-type": "application/json",
            "anthropic-version": ANTHROPIC_VERSION,
        }
        if self.config.api_key:
            headers["x-api-key"] = self.config.api_key
        return headers

    def build_messages(self, request: NormalizedRequest) -> List[Dict[str, str]]:
        return [{"role": "user", "content": request.user_prompt}]

    def build_payload(self, request: NormalizedRequest) -> Dict[str, Any]:
        payload = super().build_payload(request)
        if request.system_prompt:
            payload["system"] = request.system_prompt
        return payload

    def extract_text(self, data: Dict[str, Any]) -> str:
        blocks = data["content"]
        texts = [
            block["text"]
            for block in blocks
            if isinstance(block, dict) and block.get("type", "text") == "text"
        ]
        if not texts:
            raise ValueError("response contains no text content")
        return "".join(texts)
