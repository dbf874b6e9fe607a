"""
ud - command-line front end for UniversalLLM

    ud config --provider openai --key sk-...
    ud think "What are the implications of quantum computing on cryptography?"
    ud loop -i 2 "Improve this paragraph: ..."
    cat notes.md | ud fast "Summarize"
    ud generate -c reflect "Is this API design sound?"
    ud interactive
"""

import argparse
import logging
import sys

from pydantic import ValidationError

from . import __version__
from .client import Provider, UniversalLLM
from .config import Settings, UserConfig, get_settings, normalize_provider
from .errors import UniversalDeveloperError

logger = logging.getLogger(__name__)

PROVIDERS = [p.value for p in Provider]

SYMBOLIC_COMMANDS = [
    ("think", "Generate response using deep reasoning"),
    ("fast", "Generate quick, concise response"),
    ("loop", "Generate iteratively refined response"),
    ("reflect", "Generate response with self-reflection"),
    ("fork", "Generate multiple alternative responses"),
    ("collapse", "Generate response using default behavior"),
]


class MissingAPIKey(Exception):
    """No API key configured for the selected provider"""

    pass


# =============================================================================
# Helpers
# =============================================================================


def _user_config(settings: Settings) -> UserConfig:
    return UserConfig.load(settings.config_file)


def _get_api_key(provider: str, user_config: UserConfig, settings: Settings) -> str:
    """Config file first, then <PROVIDER>_API_KEY"""
    key = user_config.api_keys.get(provider) or settings.api_key_for(provider)
    if not key:
        raise MissingAPIKey(
            f"No API key found for {provider}.\n"
            f"Set it with: ud config --{provider}-key <your-api-key>\n"
            f"Or set the {provider.upper()}_API_KEY environment variable."
        )
    return key


def _build_client(args, settings: Settings) -> UniversalLLM:
    user_config = _user_config(settings)
    provider = normalize_provider(args.provider or user_config.default_provider)
    api_key = _get_api_key(provider, user_config, settings)

    return UniversalLLM.from_settings(
        settings,
        provider=provider,
        api_key=api_key,
        model=getattr(args, "model", None),
        telemetry_enabled=user_config.enable_telemetry and settings.telemetry_enabled,
    )


def _read_piped_input() -> str | None:
    if sys.stdin is None or sys.stdin.isatty():
        return None
    return sys.stdin.read()


def _combine_prompt(prompt: str | None) -> str:
    """Prompt argument followed by any piped stdin"""
    prompt = prompt or ""
    piped = _read_piped_input()
    if piped:
        prompt = f"{prompt}\n\n{piped}" if prompt else piped
    return prompt


def _run_prompt(args, settings: Settings, full_prompt: str) -> int:
    llm = _build_client(args, settings)
    print(f"Using provider: {llm.provider}", file=sys.stderr)
    response = llm.generate_sync(full_prompt, args.system)
    print("\n" + response + "\n")
    return 0


# =============================================================================
# Subcommands
# =============================================================================


def _config(args, settings: Settings) -> int:
    """Show or edit the CLI config file"""
    path = settings.config_file
    config = _user_config(settings)

    if args.list:
        print("\nCurrent Configuration:")
        print(f"Default Provider: {config.default_provider}")
        print(f"Telemetry: {'Enabled' if config.enable_telemetry else 'Disabled'}")
        print("\nAPI Keys:")
        for provider in PROVIDERS:
            status = "Configured" if config.api_keys.get(provider) else "Not configured"
            print(f"{provider}: {status}")
        return 0

    changed = False

    if args.provider:
        provider = normalize_provider(args.provider)
        if provider not in PROVIDERS:
            print(
                f"Invalid provider: {args.provider}. Valid options are: {', '.join(PROVIDERS)}",
                file=sys.stderr,
            )
            return 1
        config.default_provider = provider
        changed = True
        print(f"Default provider set to {provider}")

    if args.key:
        config.api_keys[config.default_provider] = args.key
        changed = True
        print(f"API key for {config.default_provider} has been set")

    for provider in PROVIDERS:
        key = getattr(args, f"{provider}_key", None)
        if key:
            config.api_keys[provider] = key
            changed = True
            print(f"API key for {provider} has been set")

    if args.telemetry is not None:
        config.enable_telemetry = args.telemetry.lower() == "true"
        changed = True
        print(f"Telemetry {'enabled' if config.enable_telemetry else 'disabled'}")

    if not changed:
        print("No changes made. Use --help to see available options.")
        return 0

    try:
        config.save(path)
    except OSError as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return 1
    print("\nConfiguration saved!")
    return 0


def _symbolic(args, settings: Settings) -> int:
    """Run one of the built-in symbolic commands"""
    prompt = _combine_prompt(args.prompt)
    if not prompt:
        print("Error: Prompt is required.", file=sys.stderr)
        print(f'Usage: ud {args.command} "Your prompt here"', file=sys.stderr)
        print(f"Or pipe content: cat file.txt | ud {args.command}", file=sys.stderr)
        return 1

    command_string = f"/{args.command}"
    if args.command == "loop" and args.iterations:
        command_string += f" --iterations={args.iterations}"
    elif args.command == "fork" and args.count:
        command_string += f" --count={args.count}"

    return _run_prompt(args, settings, f"{command_string} {prompt}")


def _generate(args, settings: Settings) -> int:
    """Prompt with an arbitrary command, think by default"""
    prompt = _combine_prompt(args.prompt)
    if not prompt:
        return _interactive(args, settings)

    command = (args.symbolic_command or "think").lstrip("/")
    return _run_prompt(args, settings, f"/{command} {prompt}")


def _commands(args, settings: Settings) -> int:
    """List registered commands and their parameters"""
    provider = normalize_provider(args.provider or _user_config(settings).default_provider)
    llm = UniversalLLM(provider, telemetry_enabled=False)

    for command in llm.commands():
        print(f"  /{command.name:<10} {command.description}")
        for param in command.parameters:
            default = f" (default: {param.default})" if param.default is not None else ""
            print(f"      --{param.name}  {param.description}{default}")
    return 0


def _interactive(args, settings: Settings) -> int:
    """Line-by-line session; each line is an independent request"""
    llm = _build_client(args, settings)

    print("\nUniversal Developer Interactive Mode")
    print(f"Using provider: {llm.provider}")
    print("Type /exit or Ctrl+C to quit, /stats for command usage")
    print("Available commands: " + ", ".join(f"/{c.name}" for c in llm.commands()) + "\n")

    while True:
        try:
            line = input("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        if not line:
            continue
        if line.lower() == "/exit":
            break
        if line.lower() == "/stats":
            for name, count in llm.get_command_usage_stats().items():
                print(f"  /{name}: {count}")
            continue

        try:
            response = llm.generate_sync(line, args.system)
        except UniversalDeveloperError as e:
            print(f"Error: {e}", file=sys.stderr)
            continue
        print(f"\nAssistant: {response}\n")

    return 0


# =============================================================================
# Entry point
# =============================================================================


def _add_client_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-p", "--provider", help=f"LLM provider to use ({', '.join(PROVIDERS)})")
    parser.add_argument("-m", "--model", help="Model to use")
    parser.add_argument("-s", "--system", help="System prompt to use")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ud",
        description="Universal Developer CLI - Control LLMs with symbolic runtime commands",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    config = sub.add_parser("config", help="Configure Universal Developer CLI")
    config.add_argument("-p", "--provider", help=f"Set default provider ({', '.join(PROVIDERS)})")
    config.add_argument("-k", "--key", help="Set API key for the default provider")
    for provider in PROVIDERS:
        config.add_argument(
            f"--{provider}-key", dest=f"{provider}_key", help=f"Set API key for {provider}"
        )
    config.add_argument(
        "--telemetry", choices=["true", "false"], help="Enable or disable anonymous telemetry"
    )
    config.add_argument("-l", "--list", action="store_true", help="List current configuration")

    for name, description in SYMBOLIC_COMMANDS:
        cmd = sub.add_parser(name, help=description)
        cmd.add_argument("prompt", nargs="?", help="The prompt to send to the LLM")
        _add_client_options(cmd)
        if name == "loop":
            cmd.add_argument("-i", "--iterations", type=int, help="Number of iterations")
        if name == "fork":
            cmd.add_argument("-c", "--count", type=int, help="Number of alternatives")

    generate = sub.add_parser("generate", help="Generate with any registered command")
    generate.add_argument("prompt", nargs="?", help="The prompt to send to the LLM")
    generate.add_argument(
        "-c", "--command", dest="symbolic_command", help="Symbolic command to use (default: think)"
    )
    _add_client_options(generate)

    interactive = sub.add_parser("interactive", aliases=["i"], help="Start an interactive session")
    _add_client_options(interactive)

    commands = sub.add_parser("commands", help="List symbolic commands")
    commands.add_argument("-p", "--provider", help="Provider whose commands to list")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Error: invalid settings: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else settings.log_level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    handlers = {
        "config": _config,
        "generate": _generate,
        "interactive": _interactive,
        "i": _interactive,
        "commands": _commands,
    }
    handlers.update({name: _symbolic for name, _ in SYMBOLIC_COMMANDS})

    try:
        return handlers[args.command](args, settings)
    except (MissingAPIKey, UniversalDeveloperError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
