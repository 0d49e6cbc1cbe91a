"""CLI entry point for widgy.

Dispatches to the validate, render, samples, generate, store and env
commands. Results go to stdout; progress and errors go to the log.
"""

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

from widgy.config import (
    EnvVar,
    get_environment,
    get_environment_info,
    list_environment_variables,
)
from widgy.core import get_logger, setup_logging
from widgy.schema import (
    DecodeError,
    WidgetConfig,
    WidgetFamily,
    decode_config,
    dumps_config,
    parse_widget_config,
)

logger = get_logger("cli")


def _read_config(path: Path, migrate: bool = True) -> WidgetConfig | None:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        logger.error(f"Cannot read {path}: {e}")
        return None

    try:
        return parse_widget_config(text) if migrate else decode_config(text)
    except DecodeError as e:
        logger.error(f"{path}: {e}")
        return None


# =============================================================================
# Validate Command
# =============================================================================


def cmd_validate(args: argparse.Namespace) -> int:
    """Handle the validate command."""
    from widgy.output import format_validation
    from widgy.validation import validate

    config = _read_config(args.file, migrate=False)
    if config is None:
        return 1

    result = validate(config)
    summary = format_validation(result)
    if summary:
        print(summary)
    status = "valid" if result.is_valid else "invalid"
    print(f"{config.name}: {status} ({len(result.errors)} error(s), {len(result.warnings)} warning(s))")
    return 0 if result.is_valid else 1


def handle_validate_command(argv: list[str]) -> int:
    """Handle validate-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="widgy validate",
        description="Decode and validate a widget config file",
    )
    parser.add_argument("file", type=Path, help="Widget config JSON file")
    return cmd_validate(parser.parse_args(argv))


# =============================================================================
# Render Command
# =============================================================================


async def _build_context(config: WidgetConfig, preview: bool):
    from widgy.providers import DataProviderRegistry, DataResolver
    from widgy.render import RenderContext

    if preview:
        return RenderContext.preview()
    resolver = DataResolver(DataProviderRegistry.make_default())
    return await resolver.make_context(config)


def render_to_text(config: WidgetConfig, preview: bool = False, show_errors: bool = False) -> str:
    """Resolve bindings, render and format `config` as text."""
    from widgy.output import generate_output
    from widgy.render import render_config
    from widgy.validation import validate

    context = asyncio.run(_build_context(config, preview))
    visual = render_config(config, context, show_errors=show_errors)
    return generate_output(config, visual, validate(config)).to_text()


def cmd_render(args: argparse.Namespace) -> int:
    """Handle the render command."""
    if args.sample:
        from widgy.samples import get_sample

        try:
            config = get_sample(args.sample)
        except KeyError as e:
            logger.error(e.args[0])
            return 1
    elif args.file:
        config = _read_config(args.file)
        if config is None:
            return 1
    else:
        logger.error("Provide a config file or --sample")
        return 1

    print(render_to_text(config, preview=args.preview, show_errors=args.show_errors))
    return 0


def handle_render_command(argv: list[str]) -> int:
    """Handle render-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="widgy render",
        description="Render a widget config to a text visual tree",
    )
    parser.add_argument("file", type=Path, nargs="?", default=None, help="Widget config JSON file")
    parser.add_argument("--sample", "-s", type=str, default=None, help="Render a bundled sample instead")
    parser.add_argument(
        "--preview",
        "-p",
        action="store_true",
        help="Use fixed preview values instead of live data providers",
    )
    parser.add_argument(
        "--show-errors",
        action="store_true",
        help="Render an error summary for invalid configs",
    )
    return cmd_render(parser.parse_args(argv))


# =============================================================================
# Samples Command
# =============================================================================


def cmd_samples(args: argparse.Namespace) -> int:
    """Handle the samples command."""
    from widgy.samples import SAMPLES, get_sample

    if not args.name:
        for name, config in SAMPLES.items():
            print(f"{name:<14} {config.name} ({config.family.value})")
        return 0

    try:
        config = get_sample(args.name)
    except KeyError as e:
        logger.error(e.args[0])
        return 1
    print(dumps_config(config))
    return 0


def handle_samples_command(argv: list[str]) -> int:
    """Handle samples-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="widgy samples",
        description="List bundled sample configs or print one as JSON",
    )
    parser.add_argument("name", type=str, nargs="?", default=None, help="Sample to print")
    return cmd_samples(parser.parse_args(argv))


# =============================================================================
# Generate Command
# =============================================================================


def cmd_generate(args: argparse.Namespace) -> int:
    """Handle the generate command."""
    from widgy.generator import GenerationError, WidgetGenerator
    from widgy.storage import FileConfigStore, StorageError

    existing = None
    if args.edit:
        existing = _read_config(args.edit)
        if existing is None:
            return 1

    try:
        generator = WidgetGenerator(max_retries=args.retries)
        logger.info(f"Generating widget for: {args.prompt}")
        output = asyncio.run(
            generator.generate(
                args.prompt,
                existing_config=existing,
                family=WidgetFamily(args.family),
            )
        )
    except (GenerationError, ValueError) as e:
        logger.error(f"Generation failed: {e}")
        return 1

    result_text = dumps_config(output.config)
    if args.output:
        args.output.write_text(result_text + "\n", encoding="utf-8")
        logger.info(f"Config saved to {args.output}")
    else:
        print(result_text)

    if args.save:
        try:
            FileConfigStore().save(output.config)
        except StorageError as e:
            logger.error(str(e))
            return 1
        logger.info(f"Stored as {output.config.id}")

    logger.info(
        f"Stats: {output.stats.attempts} attempt(s), "
        f"{output.stats.decode_retries} decode retries, "
        f"{output.stats.validation_retries} validation retries"
    )
    return 0


def handle_generate_command(argv: list[str]) -> int:
    """Handle generate-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="widgy generate",
        description="Generate a widget config from natural language",
    )
    parser.add_argument("prompt", type=str, help="Description of the widget")
    parser.add_argument(
        "--family",
        "-f",
        type=str,
        default=WidgetFamily.SYSTEM_SMALL.value,
        choices=[f.value for f in WidgetFamily],
        help="Target widget family (default: systemSmall)",
    )
    parser.add_argument(
        "--edit",
        "-e",
        type=Path,
        default=None,
        help="Existing config file to modify",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file path (prints to stdout if not specified)",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=None,
        help=f"Max generation retries (default: {EnvVar.WIDGY_GENERATION_RETRIES.value.name})",
    )
    parser.add_argument("--save", action="store_true", help="Also save to the config store")
    return cmd_generate(parser.parse_args(argv))


# =============================================================================
# Store Command
# =============================================================================


def cmd_store_list(args: argparse.Namespace) -> int:
    """Handle the store list command."""
    from widgy.storage import FileConfigStore

    store = FileConfigStore(args.dir)
    configs = store.load_all()
    if not configs:
        logger.info(f"No configs in {store.directory}")
        return 0
    for config in configs:
        print(f"{config.id}  {config.name} ({config.family.value})")
    return 0


def cmd_store_show(args: argparse.Namespace) -> int:
    """Handle the store show command."""
    from widgy.storage import FileConfigStore, StorageError

    try:
        config = FileConfigStore(args.dir).load(args.id)
    except StorageError as e:
        logger.error(str(e))
        return 1
    print(dumps_config(config))
    return 0


def cmd_store_save(args: argparse.Namespace) -> int:
    """Handle the store save command."""
    from widgy.storage import FileConfigStore, StorageError

    config = _read_config(args.file)
    if config is None:
        return 1
    try:
        FileConfigStore(args.dir).save(config)
    except StorageError as e:
        logger.error(str(e))
        return 1
    print(config.id)
    return 0


def cmd_store_delete(args: argparse.Namespace) -> int:
    """Handle the store delete command."""
    from widgy.storage import FileConfigStore

    if FileConfigStore(args.dir).delete(args.id):
        logger.info(f"Deleted {args.id}")
        return 0
    logger.error(f"Widget config not found: {args.id}")
    return 1


def handle_store_command(argv: list[str]) -> int:
    """Handle store-specific commands."""
    parser = argparse.ArgumentParser(
        prog="widgy store",
        description="Manage saved widget configs",
    )
    parser.add_argument(
        "--dir",
        type=Path,
        default=None,
        help=f"Store directory (default: {EnvVar.WIDGY_STORE_DIR.value.name})",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    list_parser = subparsers.add_parser("list", help="List saved configs")
    list_parser.set_defaults(func=cmd_store_list)

    show_parser = subparsers.add_parser("show", help="Print a saved config")
    show_parser.add_argument("id", type=str, help="Config id")
    show_parser.set_defaults(func=cmd_store_show)

    save_parser = subparsers.add_parser("save", help="Save a config file to the store")
    save_parser.add_argument("file", type=Path, help="Widget config JSON file")
    save_parser.set_defaults(func=cmd_store_save)

    delete_parser = subparsers.add_parser("delete", help="Delete a saved config")
    delete_parser.add_argument("id", type=str, help="Config id")
    delete_parser.set_defaults(func=cmd_store_delete)

    if not argv:
        parser.print_help()
        return 1

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    return args.func(args)


# =============================================================================
# Env Command
# =============================================================================


def cmd_env(_args: argparse.Namespace) -> int:
    """Handle the env command."""
    for var in list_environment_variables():
        info = get_environment_info(var)
        value = get_environment(var)
        if var is EnvVar.WIDGY_API_KEY and value:
            value = "***"
        print(f"{info.name:<26} {value!s:<30} {info.description}")
    return 0


def handle_env_command(argv: list[str]) -> int:
    """Handle env-specific arguments."""
    parser = argparse.ArgumentParser(
        prog="widgy env",
        description="Show configuration environment variables and their values",
    )
    return cmd_env(parser.parse_args(argv))


# =============================================================================
# Main
# =============================================================================


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: widgy {command} [args]")
    print("\nCommands:")
    print("  validate   Decode and validate a widget config file")
    print("  render     Render a config to a text visual tree")
    print("  samples    List or print bundled sample configs")
    print("  generate   Generate a widget config from natural language")
    print("  store      Manage saved widget configs (list, show, save, delete)")
    print("  env        Show configuration environment variables")
    print("\nExamples:")
    print("  widgy render --sample weather --preview")
    print("  widgy validate my_widget.json")
    print("  widgy generate 'battery gauge with percentage' -f systemSmall --save")
    print("  widgy store list")


COMMANDS = {
    "validate": handle_validate_command,
    "render": handle_render_command,
    "samples": handle_samples_command,
    "generate": handle_generate_command,
    "store": handle_store_command,
    "env": handle_env_command,
}


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        show_help()
        return 1

    command, rest_args = argv[0], argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    if command in COMMANDS:
        load_dotenv()
        setup_logging(get_environment(EnvVar.WIDGY_LOG_LEVEL))
        return COMMANDS[command](rest_args)

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
