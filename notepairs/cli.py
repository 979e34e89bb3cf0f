"""CLI entrypoints."""

from pathlib import Path
from typing import NoReturn

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from notepairs.config import CONFIG_ENV_VAR, NotebookConfig, dump_config, load_config
from notepairs.errors import NotebookError
from notepairs.models.entries import NotebookLayout
from notepairs.processors.dirs_pair import DirsPairProcessor
from notepairs.processors.notebook_converter import NotebookConverter
from notepairs.processors.renumber_processor import RenumberProcessor, parse_renumber_spec


console = Console()

work_dir_option = click.option(
    "-C",
    "--work-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
    help="Folder to work in instead of the current directory.",
)


def _fail(error: Exception) -> NoReturn:
    console.print(f"[bold red]Error:[/bold red] {escape(str(error))}")
    raise SystemExit(1) from error


@click.group(context_settings=dict(show_default=True))
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    envvar=CONFIG_ENV_VAR,
    help="JSON config file. Defaults to trmrk-config.json in the current directory.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None) -> None:
    """notepairs - Take notes as pairs of short and full name folders."""
    try:
        ctx.obj = load_config(config_path)
    except NotebookError as e:
        _fail(e)


@cli.command("create")
@click.argument("short_name", type=str)
@click.argument("title", type=str, default="")
@click.option("--join-str", type=str, default=None, help="Separator between the short name and the title.")
@click.option(
    "-o",
    "--open",
    "open_md_file",
    is_flag=True,
    default=False,
    help="Open the new markdown file with the default program.",
)
@work_dir_option
@click.pass_obj
def create(
    config: NotebookConfig,
    short_name: str,
    title: str,
    join_str: str | None,
    open_md_file: bool,
    work_dir: Path,
) -> None:
    """Create a new pair of folders for a note.

    Leave TITLE empty to create the pair of folders for the note files instead.

    Examples:

        notepairs create 999 "Buy milk"

        notepairs create 998 ""
    """
    processor = DirsPairProcessor(config)

    try:
        pair = processor.create(work_dir, short_name, title, join_str=join_str, open_md_file=open_md_file)
    except (NotebookError, OSError) as e:
        _fail(e)

    kind = "note files pair" if pair.is_files_pair else "note"
    console.print(f"[bold green]Created {kind}[/bold green] [bold cyan]{escape(pair.full_path.name)}[/bold cyan]")


@cli.command("update")
@click.argument("title", type=str, default="")
@click.option("--join-str", type=str, default=None, help="Separator between the short name and the title.")
@work_dir_option
@click.pass_obj
def update(config: NotebookConfig, title: str, join_str: str | None, work_dir: Path) -> None:
    """Rename the full name folder and markdown file of the note in the work dir.

    The work dir must be the short name folder of the note. Without TITLE the
    title is read from the markdown file.
    """
    processor = DirsPairProcessor(config)

    try:
        pair = processor.update_full_name(work_dir.resolve(), title or None, join_str=join_str)
    except (NotebookError, OSError) as e:
        _fail(e)

    console.print(f"[bold green]Updated[/bold green] [bold cyan]{escape(pair.full_path.name)}[/bold cyan]")


@cli.command("renumber")
@click.argument("spec", type=str)
@click.option(
    "--descending",
    is_flag=True,
    default=False,
    help="Walk index ranges in descending order and decrement destination indices.",
)
@click.option(
    "-y",
    "--yes",
    is_flag=True,
    default=False,
    help="Apply the renames without asking for confirmation.",
)
@work_dir_option
@click.pass_obj
def renumber(config: NotebookConfig, spec: str, descending: bool, yes: bool, work_dir: Path) -> None:
    """Change the index of folder pairs in the work dir.

    SPEC is a '|' separated list of SOURCE-DESTINATION mappings, where SOURCE is
    an index or an index range and '--' swaps both sides.

    Examples:

        notepairs renumber "005..010-100"

        notepairs renumber "005..010-100|020--021"
    """
    processor = RenumberProcessor(config)

    try:
        ranges = parse_renumber_spec(spec)
        plan = processor.plan(work_dir, ranges, sort_ascending=not descending)
    except (NotebookError, OSError) as e:
        _fail(e)

    if not plan.entries:
        console.print("[yellow]No folders match the renumber spec.[/yellow]")
        return

    console.print("[bold]Proposed renames:[/bold]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Original", style="cyan")
    table.add_column("Temp", style="dim")
    table.add_column("New Name", style="green")

    for entry in plan.entries:
        table.add_row(escape(entry.short_name), escape(entry.temp_short_name), escape(entry.new_short_name))
        table.add_row(escape(entry.full_name), escape(entry.temp_full_name), escape(entry.new_full_name))

    console.print(table)
    console.print()

    if not yes and not click.confirm("Apply these renames?", default=False):
        console.print("[yellow]Aborted. No folders were renamed.[/yellow]")
        return

    console.print("[cyan]Applying renames...[/cyan]")
    try:
        processor.apply(plan)
    except OSError as e:
        _fail(e)

    console.print(f"[bold green]Successfully renumbered {len(plan)} folder pair(s).[/bold green]")


@cli.command("convert")
@click.argument("src", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.argument("dest", type=click.Path(file_okay=False, path_type=Path))
@click.option(
    "--to",
    "target_layout",
    type=click.Choice([layout.value for layout in NotebookLayout]),
    required=True,
    help="Layout to convert the notebook to.",
)
@click.option("--progress/--no-progress", default=True, help="Show a progress bar.")
@click.pass_obj
def convert(config: NotebookConfig, src: Path, dest: Path, target_layout: str, progress: bool) -> None:
    """Copy the notebook in SRC into DEST, converting it to the other layout.

    'paired' turns every note markdown file into a pair of folders, 'basic'
    flattens every pair of folders back into a single markdown file.
    """
    console.print(
        f"Converting [bold cyan]{escape(str(src))}[/bold cyan] into a [bold magenta]{target_layout}[/bold magenta] "
        f"notebook at [bold cyan]{escape(str(dest))}[/bold cyan]..."
    )

    converter = NotebookConverter(config, show_progress=progress)

    try:
        stats = converter.convert(src, dest, NotebookLayout(target_layout))
    except (NotebookError, OSError) as e:
        _fail(e)

    console.print(f"[bold green]All done.[/bold green] Converted {stats.summary()}.")


@cli.command("dump-config")
@click.argument("output_file", type=click.Path(dir_okay=False, path_type=Path), required=False)
@click.pass_obj
def dump_config_cmd(config: NotebookConfig, output_file: Path | None) -> None:
    """Write the current config values to a JSON file."""
    try:
        target = dump_config(config, output_file)
    except OSError as e:
        _fail(e)

    console.print(f"Dumped configuration to file [bold cyan]{escape(str(target))}[/bold cyan]")
