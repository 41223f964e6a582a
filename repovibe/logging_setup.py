"""
Logging configuration for the CLI.

Library modules only call logging.getLogger(__name__). The CLI decides
where records go, and we send them through Rich so they match the rest
of the terminal output.
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False, console: Console = None) -> None:
    """Route log records through a RichHandler on stderr."""
    level = logging.DEBUG if verbose else logging.WARNING

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=verbose,
        rich_tracebacks=True
    )

    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True
    )

    # Third-party clients are chatty at DEBUG
    for noisy in ("urllib3", "httpx", "httpcore", "anthropic"):
        logging.getLogger(noisy).setLevel(logging.WARNING)
