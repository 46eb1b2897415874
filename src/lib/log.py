"""
Centralized logging using Loguru with context-aware verbosity.

This module provides a LOG() function that respects the current ProgramState's
verbosity level without requiring explicit state passing.

Only the orchestration layers (Compiler, CLI stages) log. The core passes in
aliases.py, transforms.py and parser.py raise typed errors instead.

Usage:
    from snapsite.lib.log import LOG, state_connectToLogger

    # At start of pipeline function:
    state_connectToLogger(state)

    # Anywhere in that context:
    LOG("Rendering 12 pages", level=1)
    LOG("Expanded 3 aliases", level=2)
    LOG(tree_dump(tree), level=3)
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Any object with a `verbosity` attribute works, so a Compiler driven
    outside the CLI pipeline can be connected directly.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=normal, 2=verbose, 3=debug)
        **kwargs: Additional loguru metadata

    Verbosity levels:
        1 = Normal output (default)
        2 = Verbose (-v)
        3 = Debug (-vv or higher)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        logger.opt(depth=1).debug(message, **kwargs)


def action_log(filepath: Any, action: str, level: int = 2) -> None:
    """
    Log a consistently formatted file action

    Example:
        action_log("source/index.md", "render")  ->  "  render source/index.md"
    """
    LOG(f"  {action} {filepath}", level=level)


def error_log(text: str) -> None:
    """Log an error regardless of verbosity"""
    logger.opt(depth=1).error(text)
