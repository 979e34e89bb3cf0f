"""Filesystem entry data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class NotebookLayout(str, Enum):
    """How notes are laid out on disk.

    BASIC: each note is a ``<idx><join><title>.md`` file, nested notes live in a
    ``<idx>`` folder next to it.
    PAIRED: each note is a ``<idx>`` / ``<idx><join><title>`` folder pair.
    """

    BASIC = "basic"
    PAIRED = "paired"


class EntryRole(str, Enum):
    """Classification of a single entry name."""

    SHORT_NAME_DIR = "short_name_dir"
    FULL_NAME_DIR = "full_name_dir"
    FULL_NAME_MD_FILE = "full_name_md_file"
    FILES_SHORT_NAME_DIR = "files_short_name_dir"
    FILES_FULL_NAME_DIR = "files_full_name_dir"
    NOTE_MD_FILE = "note_md_file"
    NOTE_FILES_FOLDER = "note_files_folder"
    UNCLASSIFIED = "unclassified"

    @property
    def is_short_name(self) -> bool:
        return self in (EntryRole.SHORT_NAME_DIR, EntryRole.FILES_SHORT_NAME_DIR)

    @property
    def is_full_name(self) -> bool:
        return self in (EntryRole.FULL_NAME_DIR, EntryRole.FULL_NAME_MD_FILE, EntryRole.FILES_FULL_NAME_DIR)

    @property
    def is_indexed(self) -> bool:
        return self.is_short_name or self.is_full_name


class RawEntry(BaseModel):
    """A directory listing entry."""

    model_config = ConfigDict(frozen=True)

    full_path: Path
    name: str
    is_folder: bool

    @classmethod
    def from_path(cls, path: Path) -> "RawEntry":
        return cls(full_path=path, name=path.name, is_folder=path.is_dir())


class ClassifiedEntry(BaseModel):
    """An entry name parsed against the naming grammar."""

    model_config = ConfigDict(frozen=True)

    name: str
    role: EntryRole
    is_folder: bool
    idx_string: str | None = None
    title_fragment: str | None = None
    full_path: Path | None = None

    @model_validator(mode="after")
    def _check_role_fields(self) -> "ClassifiedEntry":
        if self.role.is_indexed and not (self.idx_string and self.idx_string.isdigit()):
            raise ValueError(f"Role {self.role.value} requires a digits-only index string, got {self.idx_string!r}")

        has_title = self.role.is_full_name or self.role == EntryRole.NOTE_MD_FILE
        if has_title != (self.title_fragment is not None):
            raise ValueError(f"Role {self.role.value} does not match title fragment {self.title_fragment!r}")

        return self

    def __str__(self) -> str:
        return f"ClassifiedEntry('{self.name}', role={self.role.value}, idx={self.idx_string})"


class MatchedPair(BaseModel):
    """A short-name entry together with its unique full-name counterpart."""

    model_config = ConfigDict(frozen=True)

    short_entry: ClassifiedEntry
    full_entry: ClassifiedEntry

    @model_validator(mode="after")
    def _check_same_index(self) -> "MatchedPair":
        if self.short_entry.idx_string != self.full_entry.idx_string:
            raise ValueError(
                f"Paired entries must share the index string: '{self.short_entry.name}' / '{self.full_entry.name}'"
            )
        return self

    @property
    def idx_string(self) -> str:
        return self.short_entry.idx_string or ""

    @property
    def is_files_pair(self) -> bool:
        return self.short_entry.role == EntryRole.FILES_SHORT_NAME_DIR


class ScanResult(BaseModel):
    """Matched entry graph for one directory level."""

    dir_path: Path
    layout: NotebookLayout
    short_name_entries: list[MatchedPair] = Field(default_factory=list)
    notes_files_folder: ClassifiedEntry | None = None
    basic_note_files: list[ClassifiedEntry] = Field(default_factory=list)
    skipped_entries: list[ClassifiedEntry] = Field(default_factory=list)

    def pair_for_full_entry(self, entry: ClassifiedEntry) -> MatchedPair | None:
        """Return the pair whose full-name entry is ``entry``, if any."""
        for pair in self.short_name_entries:
            if pair.full_entry.name == entry.name:
                return pair
        return None

    @property
    def files_pairs(self) -> list[MatchedPair]:
        return [pair for pair in self.short_name_entries if pair.is_files_pair]

    @property
    def note_pairs(self) -> list[MatchedPair]:
        return [pair for pair in self.short_name_entries if not pair.is_files_pair]


class DirsPair(BaseModel):
    """Paths of a short/full directory pair on disk."""

    short_path: Path
    full_path: Path
    md_path: Path | None = None

    @property
    def is_files_pair(self) -> bool:
        return self.md_path is None
