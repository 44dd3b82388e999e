"""Console output helpers shared by all commands."""

from rich.console import Console

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


def plain(message: str = "") -> None:
    console.print(message, markup=False)


def success(message: str, prefix: str = "✓") -> None:
    console.print(f"{prefix} {message}", style="green", markup=False)


def warning(message: str, prefix: str = "⚠") -> None:
    console.print(f"{prefix} {message}", style="yellow", markup=False)


def error(message: str, prefix: str = "✗") -> None:
    err_console.print(f"{prefix} {message}", style="red", markup=False)


def info(message: str) -> None:
    console.print(message, style="cyan", markup=False)


def muted(message: str) -> None:
    console.print(message, style="dim", markup=False)


def checkmark(value: bool) -> str:
    return "✓" if value else "✗"
