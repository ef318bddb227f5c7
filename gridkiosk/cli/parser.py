"""Command-line argument parsing for gridkiosk."""

import argparse
from pathlib import Path
from typing import Optional

from .. import __version__


def monitor_index(value: str) -> int:
    """Parse a non-negative display index.

    Raises:
        argparse.ArgumentTypeError: If the value is not a non-negative integer
    """
    try:
        index = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid monitor index: {value!r}") from None
    if index < 0:
        raise argparse.ArgumentTypeError(f"monitor index must be >= 0, got {index}")
    return index


def port_number(value: str) -> int:
    """Parse a TCP port number in the range 1-65535.

    Raises:
        argparse.ArgumentTypeError: If the value is not a valid port
    """
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from None
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port must be between 1 and 65535, got {port}")
    return port


def create_parser() -> argparse.ArgumentParser:
    """Create the command line argument parser.

    Example:
        >>> parser = create_parser()
        >>> args = parser.parse_args(["--config", "layout.json", "--monitor", "1", "--fullscreen"])
        >>> args.monitor
        1
    """
    parser = argparse.ArgumentParser(
        prog="gridkiosk",
        description="Multi-display grid content player for kiosks and digital signage",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s --config layout.json                 # Serve the layout on 127.0.0.1:8080
  %(prog)s --config layout.json --fullscreen    # Present full-screen on the selected display
  %(prog)s --monitor 1 --fullscreen             # Present on the second display
  %(prog)s --list-monitors                      # Print detected displays and exit
        """,
    )

    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
        help="Show version information",
    )
    parser.add_argument(
        "--settings", metavar="FILE", type=Path, help="YAML settings file"
    )
    parser.add_argument(
        "--config", metavar="PATH", help="Layout configuration document (file path or URL)"
    )
    parser.add_argument(
        "--monitor", metavar="N", type=monitor_index, help="Display index to present on"
    )
    parser.add_argument(
        "--fullscreen", action="store_true", help="Enter full-screen presentation at startup"
    )
    parser.add_argument(
        "--list-monitors", action="store_true", help="Print the detected displays and exit"
    )

    server_group = parser.add_argument_group("server", "Control server options")
    server_group.add_argument("--host", help="Bind address for the control server")
    server_group.add_argument("--port", type=port_number, help="Control server port")

    logging_group = parser.add_argument_group("logging", "Logging options")
    logging_group.add_argument(
        "--log-level",
        type=str.upper,
        choices=["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console and file log level",
    )
    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable verbose logging"
    )
    logging_group.add_argument(
        "--quiet", "-q", action="store_true", help="Only log errors to the console"
    )
    logging_group.add_argument("--log-dir", metavar="DIR", help="Enable file logging to DIR")
    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console output"
    )

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return create_parser().parse_args(argv)
