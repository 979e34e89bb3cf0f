"""Creation and renaming of a single short/full directory pair."""

from pathlib import Path

import click
from rich.console import Console
from rich.markup import escape

from notepairs.config import NotebookConfig
from notepairs.errors import AmbiguousMatchError, ClassificationError, DirectoryExistsError, ValidationError
from notepairs.markdown import format_markdown_body, read_title, replace_title_line, write_keep_marker
from notepairs.models.entries import DirsPair
from notepairs.processors.name_grammar import full_name, normalize_full_name_part, note_md_file_name


console = Console()


def _path_if_missing(base_path: Path, name: str) -> Path:
    path = base_path / name
    if path.exists():
        raise DirectoryExistsError(path)
    return path


class DirsPairProcessor:
    """Creates note item pairs and note files pairs, and renames existing pairs."""

    def __init__(self, config: NotebookConfig, verbose: bool = True) -> None:
        """Initialize the processor.

        Args:
            config: Naming configuration.
            verbose: Print the created short dir name.
        """
        self.config = config
        self.verbose = verbose

    def create_pair_dirs(
        self,
        work_dir: Path,
        short_name: str,
        full_name_part: str,
        keep_title: str,
        join_str: str | None = None,
    ) -> DirsPair:
        """Create both folders of a pair and write the keep file into the full name folder.

        Raises:
            DirectoryExistsError: If either folder already exists.
        """
        short_path = _path_if_missing(work_dir, short_name)
        full_path = _path_if_missing(work_dir, full_name(short_name, full_name_part, self.config, join_str))

        short_path.mkdir()
        full_path.mkdir()
        write_keep_marker(full_path, keep_title, self.config)

        return DirsPair(short_path=short_path, full_path=full_path)

    def create(
        self,
        work_dir: Path,
        short_name: str,
        title: str | None = None,
        join_str: str | None = None,
        open_md_file: bool = False,
    ) -> DirsPair:
        """Create a note item pair, or a note files pair when no title is given.

        Args:
            work_dir: Parent folder of the new pair.
            short_name: Short folder name, usually a zero padded number.
            title: Note title. Empty or all-whitespace creates a note files pair.
            join_str: Separator override for the full folder name.
            open_md_file: Open the new markdown file with the default program.

        Returns:
            The created pair.

        Raises:
            ValidationError: If the short name is empty or opening is requested for a files pair.
            DirectoryExistsError: If either folder already exists.
        """
        short_name = short_name.strip()
        if not short_name:
            raise ValidationError("The short folder name is required")

        title = (title or "").strip()
        is_files_pair = not title

        if is_files_pair and open_md_file:
            raise ValidationError("Would not create a markdown file if creating a note files dirs pair")

        if is_files_pair:
            full_name_part = self.config.note_files_full_dir_name_part
            keep_title = full_name_part
        else:
            full_name_part = normalize_full_name_part(title, self.config)
            keep_title = title

        pair = self.create_pair_dirs(work_dir, short_name, full_name_part, keep_title, join_str)

        if self.verbose:
            console.print(f"[cyan]Short dir name:[/cyan] [bold cyan]{escape(short_name)}[/bold cyan]")

        if is_files_pair:
            return pair

        md_path = pair.short_path / note_md_file_name(full_name_part, self.config)
        md_path.write_text(format_markdown_body(title, self.config), encoding="utf-8")

        if open_md_file:
            click.launch(str(md_path))

        return pair.model_copy(update={"md_path": md_path})

    def _find_md_file(self, work_dir: Path) -> Path:
        md_files = [
            path for path in work_dir.iterdir() if path.is_file() and path.suffix == self.config.md_file_name_extension
        ]
        if len(md_files) != 1:
            raise ClassificationError(f"Expected exactly one markdown file, found {len(md_files)}: {{path}}", work_dir)
        return md_files[0]

    def _find_full_dir(self, work_dir: Path, join_str: str) -> Path:
        short_name = work_dir.name
        full_name_prefix = f"{short_name}{join_str}"

        candidates = [
            path
            for path in work_dir.parent.iterdir()
            if path.is_dir() and path.name != short_name and path.name.startswith(full_name_prefix)
        ]
        if len(candidates) != 1:
            raise AmbiguousMatchError(work_dir, len(candidates))
        return candidates[0]

    def update_full_name(self, work_dir: Path, title: str | None = None, join_str: str | None = None) -> DirsPair:
        """Rename the markdown file and full name folder of the pair whose short folder is ``work_dir``.

        With no title, the title is read from the markdown heading and the
        document is left unchanged. With a title, the heading line is rewritten
        first. The keep file is rewritten in both cases.

        Raises:
            ClassificationError: If the markdown file is missing or has no heading.
            AmbiguousMatchError: If the full name folder cannot be identified.
            DirectoryExistsError: If the new full name folder already exists.
        """
        join_str = join_str or self.config.join_str
        md_path = self._find_md_file(work_dir)

        title = (title or "").strip()
        if not title:
            titles = read_title(md_path)
            if titles is None:
                raise ClassificationError("Markdown file has no title heading: {path}", md_path)
            title = titles[0]
        else:
            replace_title_line(md_path, title)

        full_name_part = normalize_full_name_part(title, self.config)
        full_path = self._find_full_dir(work_dir, join_str)

        new_md_path = work_dir / note_md_file_name(full_name_part, self.config)
        new_full_path = work_dir.parent / full_name(work_dir.name, full_name_part, self.config, join_str)

        if new_full_path != full_path and new_full_path.exists():
            raise DirectoryExistsError(new_full_path)

        if new_md_path != md_path:
            md_path.rename(new_md_path)

        if new_full_path != full_path:
            full_path.rename(new_full_path)

        write_keep_marker(new_full_path, title, self.config)

        return DirsPair(short_path=work_dir, full_path=new_full_path, md_path=new_md_path)
