"""Naming grammar for notebook entries.

Names are built from the configured literals ``P`` (role prefix), ``J`` (join
string), ``E`` (markdown extension) and ``NP``/``NS`` (note file prefix/suffix):

    short-name directory      P<digits>
    full-name directory       P<digits>J<title>
    full-name markdown file   P<digits>J<title>E
    note markdown file        NP<title>NSE
    note files folder         exact configured name

``P`` is either the note item prefix or the note internal prefix; the latter
marks the pair that holds a note's attached files.
"""

import re
from pathlib import Path

from notepairs.config import NotebookConfig
from notepairs.models.entries import ClassifiedEntry, EntryRole, RawEntry


# Characters that cannot appear in a file name on any supported platform
INVALID_NAME_CHARS_PATTERN = re.compile(r'[<>:"/\\|?*\x00-\x1f]+')


def _split_indexed_name(
    name: str,
    is_folder: bool,
    prefix: str,
    config: NotebookConfig,
) -> tuple[str, str | None] | None:
    """Match ``name`` against ``P<digits>[J<title>[E]]`` for one prefix.

    Returns:
        ``(idx_string, title_fragment)`` with a None title for short names, or
        None when the name does not match.
    """
    if not name.startswith(prefix):
        return None

    rest = name[len(prefix) :]
    join_str = config.join_str
    join_ix = rest.find(join_str)

    if join_ix < 0:
        # Files always carry a title, only folders can be short names
        if not is_folder:
            return None
        idx_string, title = rest, None
    else:
        if join_ix == 0:
            return None

        idx_string = rest[:join_ix]
        title = rest[join_ix + len(join_str) :]

        if not is_folder:
            if not title.endswith(config.md_file_name_extension):
                return None
            title = title[: -len(config.md_file_name_extension)]

    if not idx_string or not (idx_string.isascii() and idx_string.isdigit()):
        return None

    return idx_string, title


def _match_note_md_file(name: str, config: NotebookConfig) -> str | None:
    """Return the title of a ``NP<title>NSE`` file name, or None."""
    prefix = config.note_file_name_prefix
    suffix = config.note_file_name + config.md_file_name_extension

    if len(name) < len(prefix) + len(suffix) or not name.startswith(prefix) or not name.endswith(suffix):
        return None

    return name[len(prefix) : len(name) - len(suffix)]


def classify(entry_name: str, is_folder: bool, config: NotebookConfig, full_path: Path | None = None) -> ClassifiedEntry:
    """Classify a single entry name against the naming grammar.

    The note item prefix is tried before the note internal prefix.

    Args:
        entry_name: Bare file or folder name.
        is_folder: Whether the entry is a directory.
        config: Naming configuration.
        full_path: Optional path recorded on the result.

    Returns:
        The classified entry, with role UNCLASSIFIED if nothing matches.
    """
    if is_folder and entry_name == config.basic_note_book_note_files_dir_name:
        return ClassifiedEntry(
            name=entry_name, role=EntryRole.NOTE_FILES_FOLDER, is_folder=True, full_path=full_path
        )

    if not is_folder:
        title = _match_note_md_file(entry_name, config)
        if title is not None:
            return ClassifiedEntry(
                name=entry_name,
                role=EntryRole.NOTE_MD_FILE,
                is_folder=False,
                title_fragment=title,
                full_path=full_path,
            )

    prefixes = [
        (config.note_item_dir_names_prefix, True),
        (config.note_internal_dir_names_prefix, False),
    ]

    for prefix, is_note_item in prefixes:
        parts = _split_indexed_name(entry_name, is_folder, prefix, config)
        if parts is None:
            continue

        idx_string, title = parts
        if title is None:
            role = EntryRole.SHORT_NAME_DIR if is_note_item else EntryRole.FILES_SHORT_NAME_DIR
        elif not is_folder:
            if not is_note_item:
                # Files pairs are folders only
                continue
            role = EntryRole.FULL_NAME_MD_FILE
        else:
            role = EntryRole.FULL_NAME_DIR if is_note_item else EntryRole.FILES_FULL_NAME_DIR

        return ClassifiedEntry(
            name=entry_name,
            role=role,
            is_folder=is_folder,
            idx_string=idx_string,
            title_fragment=title,
            full_path=full_path,
        )

    return ClassifiedEntry(name=entry_name, role=EntryRole.UNCLASSIFIED, is_folder=is_folder, full_path=full_path)


def classify_raw(entry: RawEntry, config: NotebookConfig) -> ClassifiedEntry:
    return classify(entry.name, entry.is_folder, config, full_path=entry.full_path)


def classify_path(path: Path, config: NotebookConfig) -> ClassifiedEntry:
    return classify_raw(RawEntry.from_path(path), config)


def is_valid_grammar_name(entry_name: str, is_folder: bool, config: NotebookConfig) -> bool:
    """Whether the name parses as any indexed entry (short or full name)."""
    return classify(entry_name, is_folder, config).role.is_indexed


def short_name(idx_string: str, config: NotebookConfig, note_item: bool = True) -> str:
    prefix = config.note_item_dir_names_prefix if note_item else config.note_internal_dir_names_prefix
    return f"{prefix}{idx_string}"


def full_name(short: str, full_name_part: str, config: NotebookConfig, join_str: str | None = None) -> str:
    return f"{short}{join_str or config.join_str}{full_name_part}"


def note_md_file_name(title: str, config: NotebookConfig) -> str:
    """Name of the markdown file kept inside a short-name directory."""
    return f"{config.note_file_name_prefix}{title}{config.note_file_name}{config.md_file_name_extension}"


def basic_md_file_name(short: str, full_name_part: str, config: NotebookConfig) -> str:
    """Name of a note markdown file in the basic layout."""
    return f"{full_name(short, full_name_part, config)}{config.md_file_name_extension}"


def normalize_full_name_part(title: str, config: NotebookConfig) -> str:
    """Turn a note title into a string usable as the full name part.

    A single leading ``:`` is dropped and ``/`` becomes ``%``. Characters that
    are invalid in file names split the title, and the non-empty parts are
    joined with single spaces and trimmed. Whitespace already in the title is
    kept as is.
    """
    if title.startswith(":"):
        title = title[1:]

    title = title.replace("/", "%")
    parts = [part for part in INVALID_NAME_CHARS_PATTERN.split(title) if part]
    normalized = " ".join(parts).strip()

    return normalized[: config.max_dir_name_length]
