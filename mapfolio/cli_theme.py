# mapfolio/cli_theme.py
"""Terminal theme for the MAPFOLIO CLI.

Teal & sand palette:
  - Wordmark banner with tagline
  - Numbered section headers ("01 · SECTION NAME")
  - Rounded tables with sand borders
  - Status lines for ok, info and warn
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from rich import box
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.style import Style
from rich.table import Table
from rich.text import Text

# ── Brand ─────────────────────────────────────────────────────────

BRAND = "M A P F O L I O"
TAGLINE = "File-backed map projects: symbols, renderers, features, layers"

# ── Palette ───────────────────────────────────────────────────────

TEAL = "#2A9D8F"
SAND = "#C8B68E"
MUTED = "dim"


# ── Banner ────────────────────────────────────────────────────────


def print_banner(version: str, console: Console) -> None:
    """Print the MAPFOLIO wordmark, tagline and version."""
    console.print(f"\n  [bold {TEAL}]{BRAND}[/bold {TEAL}]")
    console.print(f"  [{SAND}]{TAGLINE}[/{SAND}]")
    console.print(f"  [{MUTED}]v{version}[/{MUTED}]")
    console.print()


def print_version(version: str, console: Console) -> None:
    """Print a compact branded version line."""
    t = Text()
    t.append(BRAND, style=f"bold {TEAL}")
    t.append(f"  v{version}", style=MUTED)
    console.print(t)


# ── Section headers ──────────────────────────────────────────────


def section(title: str, console: Console, number: str | None = None) -> None:
    """Print a numbered section header followed by a rule."""
    console.print()
    t = Text()
    if number:
        t.append(f"  {number}", style=f"bold {TEAL}")
        t.append(" · ", style=MUTED)
    else:
        t.append("  ")
    t.append(title.upper(), style="bold")
    console.print(t)
    console.print(f"  {'─' * len(TAGLINE)}", style=SAND)


# ── Tables ───────────────────────────────────────────────────────


def make_table(title: str | None = None, **kwargs: object) -> Table:
    """Create a rounded table with a sand border."""
    return Table(
        title=title,
        box=box.ROUNDED,
        border_style=SAND,
        title_style=f"bold {TEAL}",
        header_style="bold",
        padding=(0, 1),
        **kwargs,
    )


def make_kv_table() -> Table:
    """Create a headerless two-column key–value table."""
    t = make_table(show_header=False)
    t.add_column("Key", style=f"bold {TEAL}", no_wrap=True)
    t.add_column("Value")
    return t


# ── Inline badges ────────────────────────────────────────────────


def badge(label: str, variant: str = "default") -> str:
    """Return Rich markup for a filled status badge."""
    colors = {
        "default": TEAL,
        "warn": "yellow",
        "error": "red",
    }
    c = colors.get(variant, TEAL)
    return f"[reverse {c}] {label} [/reverse {c}]"


# ── Status lines ─────────────────────────────────────────────────


def info(msg: str) -> str:
    return f"  [{TEAL}]›[/{TEAL}] [{MUTED}]{msg}[/{MUTED}]"


def ok(msg: str) -> str:
    return f"  [bold green]✓[/bold green] {msg}"


def warn(msg: str) -> str:
    return f"  [bold yellow]![/bold yellow] [yellow]{msg}[/yellow]"


# ── Progress helpers ────────────────────────────────────────────


@contextmanager
def spinner(label: str, console: Console) -> Generator[None, None, None]:
    """Teal dots spinner for indeterminate operations (project loads)."""
    p = Progress(
        TextColumn(" "),
        SpinnerColumn("dots", style=Style(color=TEAL)),
        TextColumn(f"[{MUTED}]{label}[/{MUTED}]"),
        console=console,
        transient=True,
    )
    with p:
        p.add_task(label, total=None)
        yield
