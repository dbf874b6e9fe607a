"""
OpenAI adapter

No native reasoning switch is used here, so every command is expressed
through system-prompt instructions and sampling parameters.
"""

from typing import Any, Dict

from ..transformer import NormalizedRequest, TransformContext
from .base import ModelAdapter


class OpenAIAdapter(ModelAdapter):
    """OpenAI chat completions provider"""

    name = "openai"

    DEFAULT_BASE_URL = "https://api.openai.com"
    DEFAULT_MODEL = "gpt-4"

    PASSTHROUGH_PARAMETERS = ("presence_penalty", "frequency_penalty", "top_p", "stop", "seed")

    def transform_think(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "When responding to this query, please use the following approach:\n"
            "1. Take a deep breath and think step-by-step about the problem\n"
            "2. Break down complex aspects into simpler components\n"
            "3. Consider multiple perspectives and approaches\n"
            "4. Identify potential misconceptions or errors in reasoning\n"
            "5. Synthesize your analysis into a comprehensive response\n"
            "6. Structure your thinking process visibly with clear sections:\n"
            "   a. Initial Analysis\n"
            "   b. Detailed Exploration\n"
            "   c. Synthesis and Conclusion"
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.lower_temperature(0.2),
                "max_tokens": self.config.max_tokens,
            },
        )

    def transform_fast(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        system_prompt = ctx.compose(
            "Please provide a concise, direct response. Focus only on the most essential "
            "information needed to answer the query. Keep explanations minimal and prioritize "
            "brevity over comprehensiveness."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.raise_temperature(0.1),
                "max_tokens": self.fast_max_tokens,
                # Penalize repetition to keep answers short
                "presence_penalty": 1.0,
                "frequency_penalty": 1.0,
            },
        )

    def transform_loop(self, prompt: str, ctx: TransformContext) -> NormalizedRequest:
        iterations = ctx.get_int("iterations", 3)
        system_prompt = ctx.compose(
            f"Please approach this task using an iterative refinement process with "
            f"{iterations} cycles:\n"
            "\n"
            "1. Initial Version: Create your first response to the query\n"
            "2. Critical Review: Analyze the strengths and weaknesses of your response\n"
            "3. Improved Version: Create an enhanced version addressing the identified issues\n"
            "4. Repeat steps 2-3 for each iteration\n"
            "5. Final Version: Provide your most refined response\n"
            "\n"
            'Clearly label each iteration (e.g., "Iteration 1", "Critique 1", etc.) in your response.'
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
            "For this query, please structure your response in two distinct parts:\n"
            "\n"
            "PART 1: DIRECT RESPONSE\n"
            "Provide your primary answer to the user's query.\n"
            "\n"
            "PART 2: META-REFLECTION\n"
            "Then, engage in critical reflection on your own response by addressing:\n"
            "- What assumptions did you make in your answer?\n"
            "- What alternative perspectives might be valid?\n"
            "- What are the limitations of your response?\n"
            "- How might your response be improved?\n"
            "- What cognitive biases might have influenced your thinking?\n"
            "\n"
            "Make sure both parts are clearly labeled and distinguishable."
        )
        return NormalizedRequest(
            system_prompt=system_prompt,
            user_prompt=prompt,
            model_parameters={
                "temperature": self.lower_temperature(0.1),
                "max_tokens": self.config.max_tokens,
            },
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
            f"Please provide {count} substantively different responses to this prompt. Each "
            "alternative should represent a different approach, perspective, or framework. "
            'Clearly label each alternative (e.g., "Alternative 1", "Alternative 2", etc.).'
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
        return f"{self.config.base_url}/v1/chat/completions"

    def build_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    def extract_text(self, data: Dict[str, Any]) -> str:
        content = data["choices"][0]["message"]["content"]
        if content is None:
            return ""
        if not isinstance(content, str):
            raise ValueError(f"unexpected content type: {type(content).__name__}")
        return content
