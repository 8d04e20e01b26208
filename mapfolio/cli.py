# mapfolio/cli.py
"""
MAPFOLIO CLI -- Click commands over a project directory.

Provides the ``mapfolio`` console entry-point declared in pyproject.toml as
``mapfolio.cli:cli``.  Commands call into :class:`mapfolio.project.Project`:

- connect:  load a project and show its asset graph and extent
- add:      copy a symbol/renderer/feature/layer file into a project
- layer:    create layer files and add features through a live layer
- config:   MapfolioConfig display
"""

from __future__ import annotations

import io
import json
import re
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar

import anyio
import click
from rich.console import Console
from rich.markup import escape as _esc

from . import __version__
from . import cli_theme as theme
from .config import get_config
from .errors import MapfolioError
from .features.models import Feature
from .project import Project
from .project.stages import PIPELINE
from .utils.logging import setup_logging

console = Console()

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Version
# ---------------------------------------------------------------------------

_VERSION_NUMBER = __version__


def _print_version(
    ctx: click.Context,
    _param: click.Parameter,
    value: bool,
) -> None:
    if not value or ctx.resilient_parsing:
        return
    theme.print_version(_VERSION_NUMBER, console)
    ctx.exit()


# ---------------------------------------------------------------------------
# Styled Click help
# ---------------------------------------------------------------------------


def _render_styled_help(plain: str, width: int = 80) -> str:
    """Re-render Click help with the teal/sand palette and a 2-space indent."""
    buf = io.StringIO()
    rc = Console(file=buf, force_terminal=True, width=width + 4, highlight=False)
    section: str | None = None

    for line in plain.splitlines():
        stripped = line.strip()
        if not stripped:
            rc.print()
            continue

        if line == stripped:
            if stripped.startswith("Usage:"):
                rc.print(
                    f"  [bold {theme.TEAL}]Usage:[/bold {theme.TEAL}]"
                    f" [{theme.SAND}]{_esc(stripped[6:].strip())}[/{theme.SAND}]"
                )
                section = None
                continue
            bare = stripped.rstrip(":")
            if bare in ("Options", "Commands", "Arguments"):
                rc.print(f"  [bold {theme.TEAL}]{stripped}[/bold {theme.TEAL}]")
                section = bare.lower()
                continue

        m = re.match(r"^(\s+)(\S.*?)(\s{2,})(.+)$", line) if section else None
        if m:
            ind, name, gap, desc = m.groups()
            style = f"bold {theme.TEAL}" if section == "commands" else theme.SAND
            rc.print(
                f"  {ind}[{style}]{_esc(name)}[/{style}]"
                f"{gap}[{theme.MUTED}]{_esc(desc)}[/{theme.MUTED}]"
            )
            continue

        rc.print(f"  [{theme.MUTED}]{_esc(line if section else stripped)}[/{theme.MUTED}]")

    return buf.getvalue()


class MapfolioGroup(click.Group):
    """Click group with styled help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        if ctx.parent is None:
            theme.print_banner(_VERSION_NUMBER, console)
        tmp = click.HelpFormatter(width=formatter.width)
        super().format_help(ctx, tmp)
        formatter.write(_render_styled_help(tmp.getvalue(), formatter.width or 80))

    def group(self, *args, **kwargs):
        kwargs.setdefault("cls", MapfolioGroup)
        return super().group(*args, **kwargs)

    def command(self, *args, **kwargs):
        kwargs.setdefault("cls", MapfolioCommand)
        return super().command(*args, **kwargs)


class MapfolioCommand(click.Command):
    """Click command with styled help output."""

    def format_help(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        tmp = click.HelpFormatter(width=formatter.width)
        super().format_help(ctx, tmp)
        formatter.write(_render_styled_help(tmp.getvalue(), formatter.width or 80))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(fn: Callable[..., Awaitable[T]], *args: Any) -> T:
    """Run an async project operation, turning project errors into CLI errors."""
    try:
        return anyio.run(fn, *args)
    except MapfolioError as exc:
        raise click.ClickException(str(exc)) from exc
    except OSError as exc:
        raise click.ClickException(f"Storage error: {exc}") from exc


def _parse_json_option(value: Optional[str], option: str) -> Any:
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as exc:
        raise click.BadParameter(f"not valid JSON: {exc}", param_hint=option) from exc


def _print_summary(summary: dict[str, Any]) -> None:
    theme.section("Symbols", console, "01")
    t = theme.make_table()
    t.add_column("Name", style=f"bold {theme.TEAL}")
    t.add_column("Type")
    for s in summary["symbols"]:
        t.add_row(s["name"], s["type"])
    console.print(t)

    theme.section("Renderers", console, "02")
    t = theme.make_table()
    t.add_column("Name", style=f"bold {theme.TEAL}")
    t.add_column("Type")
    t.add_column("Symbols")
    for r in summary["renderers"]:
        t.add_row(r["name"], r["type"], ", ".join(r["symbols"]) or "[dim]none[/dim]")
    console.print(t)

    theme.section("Feature sets", console, "03")
    t = theme.make_table()
    t.add_column("Name", style=f"bold {theme.TEAL}")
    t.add_column("Geometry")
    t.add_column("Features", justify="right")
    t.add_column("Fields", justify="right")
    for f in summary["feature_sets"]:
        t.add_row(f["name"], f["geometry_type"] or "-", str(f["features"]), str(f["fields"]))
    console.print(t)

    theme.section("Layers", console, "04")
    t = theme.make_table()
    t.add_column("Title", style=f"bold {theme.TEAL}")
    t.add_column("Feature set")
    t.add_column("Renderer")
    t.add_column("Editable")
    for layer in summary["layers"]:
        t.add_row(
            layer["title"],
            layer["feature_set"] or "[dim]-[/dim]",
            layer["renderer"] or "[dim]-[/dim]",
            "yes" if layer["editing_enabled"] else "no",
        )
    console.print(t)

    console.print()
    extent = summary["extent"]
    if extent:
        console.print(theme.info(
            f"Extent: {extent['xmin']}, {extent['ymin']} → {extent['xmax']}, {extent['ymax']}"
        ))
    else:
        console.print(theme.info("Extent: no features with geometry"))


# ---------------------------------------------------------------------------
# Main CLI group
# ---------------------------------------------------------------------------


@click.group(invoke_without_command=True, cls=MapfolioGroup)
@click.option(
    "--version",
    is_flag=True,
    callback=_print_version,
    expose_value=False,
    is_eager=True,
    help="Show version and exit.",
)
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log to stderr at DEBUG level.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """MAPFOLIO -- load and edit file-backed map projects."""
    cfg = get_config()
    if verbose:
        setup_logging(level="DEBUG", console_output=True)
    else:
        setup_logging(level=cfg.log_level)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# ---------------------------------------------------------------------------
# connect
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("project_root", type=click.Path(file_okay=False, path_type=Path))
@click.option("--json-output", "json_output", is_flag=True, default=False, help="Print the project summary as JSON.")
def connect(project_root: Path, json_output: bool) -> None:
    """Load a project directory and show its assets.

    Creates the Symbols, Renderers, Features and Layers subdirectories when
    they are missing, then loads them in that order.

    \b
    Examples:
      mapfolio connect ./my-project
      mapfolio connect ./my-project --json-output
    """
    if json_output:
        summary = _run(Project.connect, project_root).summary()
        click.echo(json.dumps(summary, indent=2, ensure_ascii=False))
        return
    theme.print_banner(_VERSION_NUMBER, console)
    with theme.spinner(f"Loading {project_root}...", console):
        project = _run(Project.connect, project_root)
    console.print(theme.ok(f"Connected to {project_root}"))
    _print_summary(project.summary())


# ---------------------------------------------------------------------------
# add
# ---------------------------------------------------------------------------


@cli.command()
@click.argument("kind", type=click.Choice([stage.kind for stage in PIPELINE], case_sensitive=False))
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--project", "-p", "project_root", type=click.Path(file_okay=False, path_type=Path), required=True, help="Project directory.")
def add(kind: str, source: Path, project_root: Path) -> None:
    """Copy an asset file into a project and load it.

    An existing project file with the same name is overwritten.

    \b
    Examples:
      mapfolio add symbol ~/Downloads/redDot.json -p ./my-project
      mapfolio add layer parcels.json -p ./my-project
    """

    async def _add():
        project = await Project.connect(project_root)
        return await project.add_asset(kind, source)

    asset = _run(_add)
    console.print(theme.ok(f"Added {kind} {asset.name} ({asset.file_name})"))


# ---------------------------------------------------------------------------
# layer (group)
# ---------------------------------------------------------------------------


@cli.group()
def layer() -> None:
    """Create layers and edit their features."""


@layer.command("create")
@click.argument("name")
@click.option("--project", "-p", "project_root", type=click.Path(file_okay=False, path_type=Path), required=True, help="Project directory.")
@click.option("--feature-set", "feature_set", type=str, default=None, help="Name of the feature set to display.")
@click.option("--renderer", type=str, default=None, help="Name of the renderer to draw with.")
@click.option("--editing/--no-editing", "editing_enabled", default=True, show_default=True, help="Allow edits to the layer's features.")
def layer_create(
    name: str,
    project_root: Path,
    feature_set: Optional[str],
    renderer: Optional[str],
    editing_enabled: bool,
) -> None:
    """Write a new layer file and load it.

    \b
    Examples:
      mapfolio layer create parcels -p ./my-project --feature-set parcels --renderer byZone
    """

    async def _create():
        project = await Project.connect(project_root)
        return await project.create_layer(name, feature_set, renderer, editing_enabled)

    created = _run(_create)
    console.print(theme.ok(f"Created layer {created.file_name}"))
    if feature_set and created.source_feature is None:
        console.print(theme.warn(f"Feature set {feature_set!r} is not in the project"))
    if renderer and created.renderer is None:
        console.print(theme.warn(f"Renderer {renderer!r} is not in the project"))


@layer.command("add-feature")
@click.argument("layer_name")
@click.option("--project", "-p", "project_root", type=click.Path(file_okay=False, path_type=Path), required=True, help="Project directory.")
@click.option("--attributes", type=str, default="{}", show_default=True, help="Feature attributes as a JSON object.")
@click.option("--geometry", type=str, default=None, help="Feature geometry as Esri JSON.")
def layer_add_feature(
    layer_name: str,
    project_root: Path,
    attributes: str,
    geometry: Optional[str],
) -> None:
    """Add a feature through a layer; the layer's feature file is rewritten.

    \b
    Examples:
      mapfolio layer add-feature parcels -p . --attributes '{"zone": "R1"}' \\
          --geometry '{"x": 8.5, "y": 47.4}'
    """
    attrs = _parse_json_option(attributes, "--attributes")
    if not isinstance(attrs, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--attributes")
    geom = _parse_json_option(geometry, "--geometry")

    async def _add_feature():
        project = await Project.connect(project_root)
        target = project.layer(layer_name)
        if target is None:
            raise click.ClickException(f"Layer {layer_name!r} not found in {project_root}")
        result = await target.live_layer.apply_edits(
            adds=[Feature(attributes=attrs, geometry=geom)]
        )
        return target, result

    target, result = _run(_add_feature)
    console.print(theme.ok(f"Added feature {result.add_ids[0]} to {target.live_layer.title}"))
    if target.source_feature is None:
        console.print(theme.warn("Layer has no feature set; the edit was not saved"))
    else:
        console.print(theme.info(f"Saved {target.source_feature.file_name}"))


# ---------------------------------------------------------------------------
# config (group)
# ---------------------------------------------------------------------------


@cli.group()
def config() -> None:
    """View MAPFOLIO configuration."""


@config.command("show")
def config_show() -> None:
    """Show current configuration.

    \b
    Examples:
      mapfolio config show
    """
    cfg = get_config()
    dump = cfg.model_dump()

    theme.section("Project layout", console, "01")
    t = theme.make_kv_table()
    for key in ("symbols_dir", "renderers_dir", "features_dir", "layers_dir"):
        t.add_row(key, dump[key])
    t.add_row("skip_hidden", str(dump["skip_hidden"]))
    console.print(t)

    theme.section("Editing", console, "02")
    t = theme.make_kv_table()
    t.add_row("default_editing_enabled", str(dump["default_editing_enabled"]))
    t.add_row("json_indent", "compact" if dump["json_indent"] is None else str(dump["json_indent"]))
    console.print(t)

    theme.section("Paths & logging", console, "03")
    t = theme.make_kv_table()
    t.add_row("home_dir", str(cfg.home_dir))
    t.add_row("log_dir", str(cfg.log_dir))
    t.add_row("log_level", theme.badge(dump["log_level"]))
    console.print(t)
