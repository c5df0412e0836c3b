"""
Hybrid CLI UX utilities using Charm tools (gum) with Python fallbacks.

Best UX when gum is installed; always works via rich/questionary otherwise.

Environment handling:
- Automatically detects TTY vs pipe/CI
- Respects NO_COLOR and FORCE_COLOR environment variables
"""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from contextlib import contextmanager
from typing import Any, Iterator

import questionary
from questionary import Style as QStyle
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.theme import Theme

DNICHECK_THEME = Theme(
    {
        "info": "#88C0D0",
        "success": "#A3BE8C",
        "warning": "#EBCB8B",
        "error": "#BF616A bold",
        "muted": "#D8DEE9",
    }
)


def is_interactive() -> bool:
    """Check if we're in an interactive terminal environment."""
    ci_vars = ["CI", "GITHUB_ACTIONS", "JENKINS_URL", "GITLAB_CI", "CIRCLECI", "TRAVIS"]
    if any(os.environ.get(var) for var in ci_vars):
        return False
    return sys.stdin.isatty() and sys.stdout.isatty()


console = Console(
    theme=DNICHECK_THEME,
    force_terminal=os.environ.get("FORCE_COLOR") is not None,
    no_color=os.environ.get("NO_COLOR") is not None,
)

PROMPT_STYLE = QStyle(
    [
        ("qmark", "fg:#88C0D0 bold"),
        ("question", "bold"),
        ("answer", "fg:#A3BE8C"),
        ("pointer", "fg:#88C0D0 bold"),
        ("highlighted", "fg:#81A1C1 bold"),
        ("selected", "fg:#A3BE8C"),
    ]
)


def has_gum() -> bool:
    """Check if gum is available in PATH."""
    return shutil.which("gum") is not None


def _run_gum(args: list[str], **kwargs: Any) -> subprocess.CompletedProcess:
    """Run gum command with given arguments."""
    return subprocess.run(["gum", *args], **kwargs)


@contextmanager
def spinner(message: str) -> Iterator[None]:
    """Show a rich spinner while work is in progress."""
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(description=message, total=None)
        yield


# === Output Formatting ===


def success(message: str) -> None:
    console.print(f"[success]✓ {message}[/success]")


def error(message: str) -> None:
    console.print(f"[error]✗ {message}[/error]")


def warning(message: str) -> None:
    console.print(f"[warning]⚠ {message}[/warning]")


def info(message: str) -> None:
    console.print(f"[info]ℹ {message}[/info]")


def panel(body: str, title: str, style: str = "cyan") -> None:
    console.print()
    console.print(Panel(body, title=f"[bold]{title}[/bold]", border_style=style))


# === Interactive Prompts ===


def confirm(message: str, default: bool = False) -> bool:
    """Ask for confirmation."""
    if has_gum():
        default_flag = "--default" if default else "--default=false"
        result = _run_gum(["confirm", default_flag, message])
        return result.returncode == 0
    return questionary.confirm(message, default=default, style=PROMPT_STYLE).ask() or False


def text_input(message: str, default: str = "", placeholder: str = "") -> str:
    """Get text input from user."""
    if has_gum():
        result = _run_gum(
            ["input", "--placeholder", placeholder or message, "--value", default],
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() if result.returncode == 0 else default
    return questionary.text(message, default=default, style=PROMPT_STYLE).ask() or default


def select(message: str, choices: list[str], default: str | None = None) -> str:
    """Select from a list of choices."""
    if has_gum():
        result = _run_gum(
            ["choose", "--header", message, *choices],
            capture_output=True,
            text=True,
        )
        return result.stdout.strip() if result.returncode == 0 else (default or choices[0])
    return questionary.select(
        message,
        choices=choices,
        default=default,
        style=PROMPT_STYLE,
    ).ask() or (default or choices[0])
