"""Conversion of a whole notebook tree between the basic and paired layouts."""

import shutil
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import TypeVar

from tqdm import tqdm

from notepairs.config import NotebookConfig
from notepairs.errors import ClassificationError
from notepairs.markdown import read_title
from notepairs.models.entries import ClassifiedEntry, EntryRole, NotebookLayout
from notepairs.processors.dirs_pair import DirsPairProcessor
from notepairs.processors.name_grammar import basic_md_file_name, classify_raw, note_md_file_name, short_name
from notepairs.processors.notebook_scanner import ensure_destination_ready, list_entries, scan


T = TypeVar("T")


@dataclass
class ConversionStats:
    """Counts of what a conversion wrote."""

    notes: int = 0
    note_files_folders: int = 0
    levels: int = 0

    def summary(self) -> str:
        return f"{self.notes} note(s), {self.note_files_folders} note files folder(s), {self.levels} level(s)"


class NotebookConverter:
    """Converts a notebook between the basic and the paired layout.

    The source tree is never modified. The destination is filled one directory
    level at a time, recursing depth first into the short name folders that hold
    nested notes. A failure aborts the conversion and leaves whatever was already
    written in the destination; empty the destination before running again.
    """

    def __init__(self, config: NotebookConfig, show_progress: bool = True) -> None:
        self.config = config
        self.show_progress = show_progress
        self.dirs_pair = DirsPairProcessor(config, verbose=False)

    def convert(self, src_path: Path, dest_path: Path, target_layout: NotebookLayout) -> ConversionStats:
        """Convert the notebook at ``src_path`` into ``target_layout`` under ``dest_path``.

        Args:
            src_path: Root of the source notebook, in the other layout.
            dest_path: Destination root. Created if missing.
            target_layout: Layout to produce.

        Returns:
            ConversionStats with counts of converted entries.

        Raises:
            PreconditionError: If the destination is not usable.
            ValidationError: If the source does not follow the naming grammar.
        """
        ensure_destination_ready(src_path, dest_path, target_layout)
        stats = ConversionStats()

        if target_layout == NotebookLayout.PAIRED:
            self._to_paired_level(src_path, dest_path, stats, depth=0)
        else:
            self._to_basic_level(src_path, dest_path, stats, depth=0)

        return stats

    def _iter(self, items: Iterable[T], desc: str, depth: int) -> Iterator[T]:
        items = list(items)
        yield from tqdm(items, desc=desc, total=len(items), disable=not self.show_progress or depth > 0)

    def _keep_title(self, md_entry: ClassifiedEntry) -> str:
        titles = read_title(md_entry.full_path) if md_entry.full_path else None
        return titles[0] if titles else md_entry.title_fragment or ""

    def _to_paired_level(self, src_path: Path, dest_path: Path, stats: ConversionStats, depth: int) -> None:
        result = scan(src_path, NotebookLayout.BASIC, self.config)
        stats.levels += 1
        nested: list[tuple[Path, Path]] = []

        for md_entry in self._iter(result.basic_note_files, "Converting notes...", depth):
            title = md_entry.title_fragment or ""
            pair = self.dirs_pair.create_pair_dirs(
                dest_path,
                short_name(md_entry.idx_string or "", self.config),
                title,
                self._keep_title(md_entry),
            )
            shutil.copy2(md_entry.full_path, pair.short_path / note_md_file_name(title, self.config))
            stats.notes += 1

            matched = result.pair_for_full_entry(md_entry)
            if matched is not None:
                nested.append((matched.short_entry.full_path, pair.short_path))

        files_folder = result.notes_files_folder
        if files_folder is not None:
            files_name_part = self.config.note_files_full_dir_name_part
            pair = self.dirs_pair.create_pair_dirs(
                dest_path,
                short_name(self.config.note_files_idx, self.config, note_item=False),
                files_name_part,
                files_name_part,
            )
            shutil.copytree(files_folder.full_path, pair.short_path, dirs_exist_ok=True)
            stats.note_files_folders += 1

        for src_child, dest_child in nested:
            self._to_paired_level(src_child, dest_child, stats, depth + 1)

    def _to_basic_level(self, src_path: Path, dest_path: Path, stats: ConversionStats, depth: int) -> None:
        result = scan(src_path, NotebookLayout.PAIRED, self.config)
        stats.levels += 1
        nested: list[tuple[Path, Path]] = []

        for pair in self._iter(result.note_pairs, "Converting notes...", depth):
            short_dir = pair.short_entry.full_path
            children = list_entries(short_dir)

            md_files = [
                entry
                for entry in children
                if classify_raw(entry, self.config).role == EntryRole.NOTE_MD_FILE
            ]
            if len(md_files) != 1:
                raise ClassificationError(
                    f"Short name dir with {len(md_files)} note markdown files: {{path}}", short_dir
                )

            md_name = basic_md_file_name(pair.short_entry.name, pair.full_entry.title_fragment or "", self.config)
            shutil.copy2(md_files[0].full_path, dest_path / md_name)
            stats.notes += 1

            if len(children) > 1:
                dest_child = dest_path / pair.short_entry.name
                dest_child.mkdir()
                nested.append((short_dir, dest_child))

        for pair in result.files_pairs:
            files_folder = dest_path / self.config.basic_note_book_note_files_dir_name
            shutil.copytree(pair.short_entry.full_path, files_folder, dirs_exist_ok=True)
            stats.note_files_folders += 1

        for src_child, dest_child in nested:
            self._to_basic_level(src_child, dest_child, stats, depth + 1)
