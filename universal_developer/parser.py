"""
Command Parser

Recognizes a leading symbolic token and its inline parameters:

    /loop --iterations=5 improve this paragraph
    ^^^^^ ^^^^^^^^^^^^^^ ^^^^^^^^^^^^^^^^^^^^^^
    command  parameter      clean prompt

Only the first token is structural. In ``/think /loop hi`` the ``/loop`` part
is ordinary text that reaches the model untouched.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from .commands import CommandRegistry, SymbolicCommand

logger = logging.getLogger(__name__)


@dataclass
class ParsedInvocation:
    """Result of parsing one prompt"""

    command: str | None
    clean_prompt: str
    remainder: str = ""
    parameters: dict[str, Any] = field(default_factory=dict)
    missing: list[str] = field(default_factory=list)

    @property
    def matched(self) -> bool:
        return self.command is not None

    @classmethod
    def plain(cls, prompt: str) -> "ParsedInvocation":
        """No recognized command: text passes through unchanged"""
        return cls(command=None, clean_prompt=prompt, remainder=prompt)


class CommandParser:
    """Parse prompts against one command registry"""

    # Token ends at whitespace or end of text: "/fast-track" is not /fast
    COMMAND_PATTERN = re.compile(r"^/(?P<name>[A-Za-z0-9_]+)(?=\s|$)")

    PARAMETER_PATTERN = re.compile(
        r"""
        (?<!\S)                     # Starts a whitespace-delimited token
        --(?P<name>[A-Za-z0-9_]+)   # Parameter name
        (?:=(?P<value>\S+))?        # Optional value, bare flag means True
        (?!\S)
        """,
        re.VERBOSE,
    )

    def __init__(self, registry: CommandRegistry):
        self.registry = registry

    def extract_token(self, prompt: str) -> str | None:
        """Leading command token, resolved or not"""
        match = self.COMMAND_PATTERN.match(prompt)
        return match.group("name") if match else None

    def parse(self, prompt: str) -> ParsedInvocation:
        match = self.COMMAND_PATTERN.match(prompt)
        if not match:
            return ParsedInvocation.plain(prompt)

        command = self.registry.resolve(match.group("name"))
        if command is None:
            return ParsedInvocation.plain(prompt)

        rest = prompt[match.end():]
        first_line, newline, tail = rest.partition("\n")

        supplied: dict[str, Any] = {}
        for param in self.PARAMETER_PATTERN.finditer(first_line):
            value = param.group("value")
            supplied[param.group("name")] = True if value is None else value

        if supplied:
            first_line = " ".join(self.PARAMETER_PATTERN.sub(" ", first_line).split())

        parameters, missing = self._bind(command, supplied)

        return ParsedInvocation(
            command=command.name,
            clean_prompt=(first_line + newline + tail).strip(),
            remainder=rest.strip(),
            parameters=parameters,
            missing=missing,
        )

    def _bind(
        self, command: SymbolicCommand, supplied: dict[str, Any]
    ) -> tuple[dict[str, Any], list[str]]:
        """Merge declared defaults with supplied values"""
        parameters: dict[str, Any] = {
            decl.name: decl.default for decl in command.parameters if decl.default is not None
        }

        for name, raw in supplied.items():
            decl = command.get_parameter(name)
            if decl is None:
                parameters[name] = raw
                continue
            try:
                parameters[name] = decl.coerce(raw)
            except ValueError as e:
                logger.warning(
                    f"Ignoring --{name} for /{command.name}: {e}; using default {decl.default!r}"
                )

        missing = [
            decl.name for decl in command.parameters if decl.required and decl.name not in parameters
        ]
        if missing:
            logger.warning(f"/{command.name} missing required parameters: {', '.join(missing)}")

        return parameters, missing
