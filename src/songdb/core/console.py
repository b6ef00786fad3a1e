"""Centralized Rich Console management."""

from rich.console import Console

_console: Console | None = None
_error_console: Console | None = None


def get_console(stderr: bool = False) -> Console:
    """Get or create the global Rich Console instance.

    Args:
        stderr: Return the console bound to stderr instead of stdout

    Returns:
        Console: The global Rich Console instance
    """
    global _console, _error_console
    if stderr:
        if _error_console is None:
            _error_console = Console(stderr=True)
        return _error_console
    if _console is None:
        _console = Console()
    return _console


def safe_print(message: str, style: str | None = None, stderr: bool = False) -> None:
    """Print using Rich Console with optional styling.

    Markup and wrapping are disabled so track lines such as "['Drake']"
    print verbatim on one line.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "bold red", "green")
        stderr: Print to stderr instead of stdout
    """
    console = get_console(stderr=stderr)
    console.print(
        message, style=style, markup=False, emoji=False, highlight=False, soft_wrap=True
    )
