"""Notebook naming configuration."""

import json
from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_pascal

from notepairs.errors import ConfigError


CONFIG_FILE_NAME = "trmrk-config.json"

# Environment variable read by the CLI to locate the config file
CONFIG_ENV_VAR = "NOTEPAIRS_CONFIG"


class NotebookConfig(BaseModel):
    """Literal separators and templates used to build and parse entry names.

    Field names are serialized with PascalCase aliases so config files written by
    earlier versions of the tool keep loading.
    """

    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, frozen=True)

    md_file_name_extension: str = Field(default=".md", min_length=1)
    full_dir_name_join_str: str = Field(default="-", min_length=1)
    note_item_dir_names_prefix: str = Field(default="", alias="NoteItemDirNamesPfx")
    note_internal_dir_names_prefix: str = Field(default="_", alias="NoteInternalDirNamesPfx")
    note_file_name_prefix: str = Field(default="", alias="NoteFileNamePfx")
    note_file_name: str = Field(default="[note]", description="Suffix appended to the title in note file names")
    note_files_full_dir_name_part: str = "[note-files]"
    note_files_idx: str = Field(default="001", pattern=r"^\d+$")
    basic_note_book_note_files_dir_name: str = Field(default="NF", min_length=1)
    keep_file_name: str = Field(default=".keep", min_length=1)
    keep_file_contents_template: str = "{title}"
    keep_file_contains_note_json: bool = False
    md_file_contents_template: str = "# {title}  \n\n"
    max_dir_name_length: int = Field(default=100, gt=0)

    @model_validator(mode="after")
    def _check_prefixes(self) -> "NotebookConfig":
        # Item names are matched first, so an internal prefix that reads as an
        # item index is never reached
        item_prefix = self.note_item_dir_names_prefix
        internal_prefix = self.note_internal_dir_names_prefix
        rest = internal_prefix[len(item_prefix) :]

        if internal_prefix.startswith(item_prefix) and (not rest or rest[0].isdigit()):
            raise ConfigError(
                f"NoteInternalDirNamesPfx '{internal_prefix}' cannot be told apart from note item names "
                f"with NoteItemDirNamesPfx '{item_prefix}'"
            )
        return self

    @property
    def join_str(self) -> str:
        """Shorthand for the separator between index and title."""
        return self.full_dir_name_join_str

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, indent=2)


def default_config_path() -> Path:
    return Path.cwd() / CONFIG_FILE_NAME


def load_config(path: Path | str | None = None) -> NotebookConfig:
    """Load the config file, falling back to defaults when it does not exist.

    Args:
        path: Config file path. Defaults to ``trmrk-config.json`` in the current directory.

    Returns:
        The parsed configuration.

    Raises:
        ConfigError: If the file is not valid JSON or holds invalid values.
    """
    config_path = Path(path) if path is not None else default_config_path()

    if not config_path.is_file():
        return NotebookConfig()

    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigError(f"Config file is not valid JSON: {config_path} ({e})") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"Config file must contain a JSON object: {config_path}")

    # Keys explicitly set to null keep their default
    raw = {key: value for key, value in raw.items() if value is not None}

    try:
        return NotebookConfig.model_validate(raw)
    except PydanticValidationError as e:
        raise ConfigError(f"Invalid config values in {config_path}:\n{e}") from e


def dump_file_name(now: datetime | None = None) -> str:
    """Build the timestamped file name used when dumping the config."""
    now = now or datetime.now(timezone.utc)
    stem, suffix = CONFIG_FILE_NAME.rsplit(".", 1)
    return f"{stem}-{now.strftime('%Y-%m-%d_%H-%M-%S.%f')}.{suffix}"


def dump_config(config: NotebookConfig, path: Path | str | None = None) -> Path:
    """Write the configuration as indented JSON.

    Raises:
        FileExistsError: If the target file already exists.
    """
    target = Path(path) if path is not None else Path.cwd() / dump_file_name()

    if target.exists():
        raise FileExistsError(f"File with name {target.name} already exists: {target}")

    target.write_text(config.to_json(), encoding="utf-8")
    return target
