"""Read-only scan of one notebook directory level."""

from pathlib import Path

from rich.console import Console
from rich.markup import escape

from notepairs.config import NotebookConfig
from notepairs.errors import (
    ClassificationError,
    DestinationNotEmptyError,
    SameSourceAndDestinationError,
)
from notepairs.models.entries import ClassifiedEntry, EntryRole, NotebookLayout, RawEntry, ScanResult
from notepairs.processors.entry_matcher import match
from notepairs.processors.name_grammar import classify_raw


console = Console()

# Roles allowed in a basic layout directory
BASIC_LAYOUT_ROLES = frozenset(
    {
        EntryRole.SHORT_NAME_DIR,
        EntryRole.FULL_NAME_MD_FILE,
        EntryRole.NOTE_FILES_FOLDER,
    }
)

# Folder roles allowed in a paired layout directory
PAIRED_LAYOUT_FOLDER_ROLES = frozenset(
    {
        EntryRole.SHORT_NAME_DIR,
        EntryRole.FULL_NAME_DIR,
        EntryRole.FILES_SHORT_NAME_DIR,
        EntryRole.FILES_FULL_NAME_DIR,
    }
)

# Entries a basic layout destination may already hold
MAX_BASIC_DESTINATION_ENTRIES = 1


def list_entries(dir_path: Path) -> list[RawEntry]:
    """List the immediate children of a directory, folders first, sorted by name."""
    entries = [RawEntry.from_path(path) for path in dir_path.iterdir()]
    return sorted(entries, key=lambda entry: (not entry.is_folder, entry.name))


def _validate_basic_entry(entry: ClassifiedEntry) -> None:
    if entry.role not in BASIC_LAYOUT_ROLES:
        raise ClassificationError(
            "A basic note book entry should be either a short name dir, the note files folder "
            "or a full name markdown file: {path}",
            entry.full_path or entry.name,
        )


def _validate_paired_entry(entry: ClassifiedEntry) -> bool:
    """Return False for files that are skipped in a paired layout."""
    if not entry.is_folder:
        return False

    if entry.role not in PAIRED_LAYOUT_FOLDER_ROLES:
        raise ClassificationError(
            "A dirs pair note book folder should be either a short name dir or a full name dir: {path}",
            entry.full_path or entry.name,
        )

    return True


def scan(dir_path: Path, layout: NotebookLayout, config: NotebookConfig) -> ScanResult:
    """Classify the children of ``dir_path`` and assemble the matched entry graph.

    Args:
        dir_path: Directory to scan.
        layout: Layout the directory is expected to be in.
        config: Naming configuration.

    Returns:
        ScanResult with matched short/full pairs. For the basic layout it also
        holds the full-name markdown files and the note files folder.

    Raises:
        ClassificationError: If an entry does not belong in the layout.
        AmbiguousMatchError: If a short-name entry has zero or several counterparts.
    """
    classified = [classify_raw(entry, config) for entry in list_entries(dir_path)]
    skipped: list[ClassifiedEntry] = []

    if layout == NotebookLayout.BASIC:
        for entry in classified:
            _validate_basic_entry(entry)
        kept = classified
    else:
        kept = []
        for entry in classified:
            if _validate_paired_entry(entry):
                kept.append(entry)
            else:
                skipped.append(entry)

    for entry in skipped:
        if entry.role == EntryRole.NOTE_MD_FILE:
            continue
        console.print(f"[yellow]Skipping unrelated file:[/yellow] {escape(str(entry.full_path))}")

    short_entries = [entry for entry in kept if entry.role.is_short_name]
    pairs = match(short_entries, kept, layout)

    notes_files_folder = next((entry for entry in kept if entry.role == EntryRole.NOTE_FILES_FOLDER), None)
    basic_note_files = [entry for entry in kept if entry.role == EntryRole.FULL_NAME_MD_FILE]

    return ScanResult(
        dir_path=dir_path,
        layout=layout,
        short_name_entries=pairs,
        notes_files_folder=notes_files_folder,
        basic_note_files=basic_note_files,
        skipped_entries=skipped,
    )


def ensure_destination_ready(src_path: Path, dest_path: Path, target_layout: NotebookLayout) -> None:
    """Check the conversion preconditions, creating the destination if missing.

    A paired-layout destination must be empty. A basic-layout destination may
    hold a single entry left by a previously started run.

    Raises:
        SameSourceAndDestinationError: If both paths resolve to the same directory.
        DestinationNotEmptyError: If the destination holds too many entries.
    """
    if src_path.resolve() == dest_path.resolve():
        raise SameSourceAndDestinationError(src_path)

    dest_path.mkdir(parents=True, exist_ok=True)

    allowed = 0 if target_layout == NotebookLayout.PAIRED else MAX_BASIC_DESTINATION_ENTRIES
    if len(list(dest_path.iterdir())) > allowed:
        raise DestinationNotEmptyError(dest_path)
