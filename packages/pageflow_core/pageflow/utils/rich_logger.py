"""
Rich logging for pageflow.

Installs a ``rich`` handler on the root logger for command-line use.
Library modules only ever call ``logging.getLogger(__name__)``.
"""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


def create_handler(console: Optional[Console] = None, show_path: bool = False) -> RichHandler:
    """
    Create a configured rich handler.

    Args:
        console: Console to write to (stderr when omitted)
        show_path: Whether to show the emitting module path

    Returns:
        RichHandler instance
    """
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_time=True,
        show_path=show_path,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter(fmt="%(message)s", datefmt="[%X]"))
    return handler


def setup_logging(level: str = "INFO", use_rich: bool = True, console: Optional[Console] = None) -> None:
    """
    Setup logging for the application.

    Args:
        level: Log level name
        use_rich: Whether to use rich logging
        console: Optional console for the rich handler
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if use_rich:
        root_logger.addHandler(create_handler(console))
    else:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(f"Logging initialized at {level} level (rich={use_rich})")
