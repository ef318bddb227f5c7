"""CLI module for gridkiosk: argument parsing, settings overrides and run modes."""

from typing import Optional

from ..settings.exceptions import SettingsError
from ..settings.models import load_settings
from ..utils.logging import apply_command_line_overrides, setup_logging
from .parser import create_parser, parse_args
from .runner import apply_cli_overrides, list_monitors, run_player


async def main_entry(argv: Optional[list[str]] = None) -> int:
    """Main entry point with argument parsing.

    Returns:
        Exit code (0 for success, 1 for failure)
    """
    args = parse_args(argv)

    try:
        settings = load_settings(args.settings)
    except SettingsError as e:
        print(f"Settings error: {e}")
        return 1

    apply_command_line_overrides(settings, args)
    apply_cli_overrides(settings, args)
    setup_logging(settings.logging)

    if args.list_monitors:
        return await list_monitors(settings)
    return await run_player(settings)


__all__ = [
    "apply_cli_overrides",
    "create_parser",
    "list_monitors",
    "main_entry",
    "parse_args",
    "run_player",
]
