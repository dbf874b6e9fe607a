"""
Symbolic Command Registry

Holds the commands a prompt can start with (``/think``, ``/loop`` ...).
Each adapter owns one registry, so custom commands registered on one client
never leak into another.

Usage:
    registry = CommandRegistry()
    registry.register(SymbolicCommand(
        name="summarize",
        description="Summarize the input",
        aliases=("tldr",),
        transform=my_transform,
    ))

    registry.resolve("tldr").name   # "summarize"
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off"}


# =============================================================================
# Types
# =============================================================================


@dataclass(frozen=True)
class ParameterDeclaration:
    """
    Parameter accepted by a symbolic command.

    The type of ``default`` is the declared type: supplied text values are
    coerced to it by :meth:`coerce`. Parameters without a default are kept as
    the raw supplied value.
    """

    name: str
    description: str = ""
    required: bool = False
    default: Any = None

    @classmethod
    def from_value(cls, value: "ParameterDeclaration | Mapping[str, Any]") -> "ParameterDeclaration":
        """Accept a declaration or a plain dict with the same keys"""
        if isinstance(value, ParameterDeclaration):
            return value
        return cls(
            name=value["name"],
            description=value.get("description", ""),
            required=bool(value.get("required", False)),
            default=value.get("default"),
        )

    def coerce(self, value: Any) -> Any:
        """
        Convert a supplied value to the declared type.

        Raises ValueError when the value cannot be represented in that type.
        """
        if self.default is None:
            return value

        if isinstance(self.default, bool):
            if isinstance(value, bool):
                return value
            word = str(value).strip().lower()
            if word in _TRUE_WORDS:
                return True
            if word in _FALSE_WORDS:
                return False
            raise ValueError(f"not a boolean: {value!r}")

        if isinstance(value, bool):
            # Bare "--name" for a non-boolean parameter
            raise ValueError("flag given without a value")
        if isinstance(value, type(self.default)):
            return value

        if isinstance(self.default, int):
            return int(str(value).strip())
        if isinstance(self.default, float):
            return float(str(value).strip())
        return str(value)


@dataclass(frozen=True)
class SymbolicCommand:
    """A named prompt transformation"""

    name: str
    transform: Callable[..., Any]
    description: str = ""
    parameters: tuple[ParameterDeclaration, ...] = field(default_factory=tuple)
    aliases: tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self):
        # Allow lists / dicts on construction, store immutable tuples
        object.__setattr__(
            self,
            "parameters",
            tuple(ParameterDeclaration.from_value(p) for p in self.parameters),
        )
        aliases = (self.aliases,) if isinstance(self.aliases, str) else tuple(self.aliases)
        object.__setattr__(self, "aliases", aliases)

    def get_parameter(self, name: str) -> ParameterDeclaration | None:
        for param in self.parameters:
            if param.name == name:
                return param
        return None


# =============================================================================
# Registry
# =============================================================================


class CommandRegistry:
    """
    Name and alias table for symbolic commands.

    Registering a name or alias that already exists replaces it; the last
    registration wins so callers can override the built-ins.
    """

    def __init__(self):
        self._commands: dict[str, SymbolicCommand] = {}
        self._aliases: dict[str, str] = {}

    def register(self, command: SymbolicCommand) -> None:
        """Insert or replace a command and its aliases"""
        if command.name in self._commands:
            logger.debug(f"Replacing command: {command.name}")
        self._commands[command.name] = command

        for alias in command.aliases:
            self._aliases[alias] = command.name

    def resolve_name(self, token: str) -> str | None:
        """Canonical command name for a token, or None"""
        if token in self._commands:
            return token
        target = self._aliases.get(token)
        if target in self._commands:
            return target
        return None

    def resolve(self, token: str) -> SymbolicCommand | None:
        """Command registered under a name or alias, or None"""
        name = self.resolve_name(token)
        return self._commands[name] if name else None

    def names(self) -> list[str]:
        return list(self._commands)

    def __contains__(self, token: object) -> bool:
        return isinstance(token, str) and self.resolve_name(token) is not None

    def __iter__(self) -> Iterator[SymbolicCommand]:
        return iter(list(self._commands.values()))

    def __len__(self) -> int:
        return len(self._commands)
