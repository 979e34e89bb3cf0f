"""Index renumbering data models."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator


class RenumberRange(BaseModel):
    """One ``source-destination`` mapping of the index-range mini-language."""

    model_config = ConfigDict(frozen=True)

    source_start: str = Field(pattern=r"^\d+$")
    source_end: str | None = Field(default=None, pattern=r"^\d+$")
    is_source_range: bool = False
    dest_start: str = Field(pattern=r"^\d+$")
    is_swap: bool = False

    @model_validator(mode="after")
    def _check_single_index(self) -> "RenumberRange":
        if not self.is_source_range and self.source_end is not None:
            raise ValueError("A single index mapping cannot have a source end")
        return self

    def __str__(self) -> str:
        if self.is_source_range:
            source = f"{self.source_start}..{self.source_end or ''}"
        else:
            source = self.source_start
        separator = "--" if self.is_swap else "-"
        return f"{source}{separator}{self.dest_start}"


class RenamePlanEntry(BaseModel):
    """Names and paths used to move one short/full directory pair."""

    model_config = ConfigDict(frozen=True)

    idx_string: str
    new_idx_string: str
    short_name: str
    temp_short_name: str
    new_short_name: str
    full_name: str
    temp_full_name: str
    new_full_name: str
    short_path: Path
    temp_short_path: Path
    new_short_path: Path
    full_path: Path
    temp_full_path: Path
    new_full_path: Path

    def __str__(self) -> str:
        return f"RenamePlanEntry('{self.short_name}' -> '{self.new_short_name}', '{self.full_name}' -> '{self.new_full_name}')"  # noqa: E501


class RenamePlan(BaseModel):
    """A validated renumbering batch for one directory."""

    dir_path: Path
    entries: list[RenamePlanEntry] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def mapping(self) -> dict[str, str]:
        """Source index string to destination index string."""
        return {entry.idx_string: entry.new_idx_string for entry in self.entries}
