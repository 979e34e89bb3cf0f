"""Markdown title and sidecar file helpers."""

import html
import json
from pathlib import Path

from notepairs.config import NotebookConfig
from notepairs.errors import ClassificationError


TITLE_PREFIX = "# "


def read_title(md_path: Path) -> tuple[str, str] | None:
    """Extract the first ``# `` heading of a markdown file.

    Args:
        md_path: Markdown file path.

    Returns:
        ``(plain_title, html_encoded_title)`` or None if the file has no heading.
        The heading text is stored HTML-encoded on disk, so the plain title is
        its decoded form. Bytes that are not valid UTF-8 read as U+FFFD.
    """
    with md_path.open(encoding="utf-8", errors="replace") as f:
        for line in f:
            if line.startswith(TITLE_PREFIX):
                md_title = line[len(TITLE_PREFIX) :].strip()
                return html.unescape(md_title), md_title
    return None


def encode_title(title: str) -> str:
    return html.escape(title, quote=False)


def format_markdown_body(title: str, config: NotebookConfig) -> str:
    """Initial contents of a newly created note markdown file."""
    return config.md_file_contents_template.format(title=encode_title(title))


def format_keep_marker(title: str, config: NotebookConfig) -> str:
    """Contents of the keep file written into a full-name directory."""
    if config.keep_file_contains_note_json:
        return json.dumps({"title": title}, indent=2, ensure_ascii=False)
    return config.keep_file_contents_template.format(title=encode_title(title))


def write_keep_marker(dir_path: Path, title: str, config: NotebookConfig) -> Path:
    """Create or overwrite the keep file inside ``dir_path``."""
    keep_path = dir_path / config.keep_file_name
    keep_path.write_text(format_keep_marker(title, config), encoding="utf-8")
    return keep_path


def replace_title_line(md_path: Path, title: str) -> bool:
    """Rewrite the first heading line with a new title.

    Returns:
        True if a heading line was found and replaced.

    Raises:
        ClassificationError: If the file is not UTF-8 encoded.
    """
    try:
        text = md_path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ClassificationError("Markdown file is not UTF-8 encoded: {path}", md_path) from e

    lines = text.splitlines(keepends=True)

    for ix, line in enumerate(lines):
        if line.startswith(TITLE_PREFIX):
            newline = "\n" if line.endswith("\n") else ""
            lines[ix] = f"{TITLE_PREFIX}{encode_title(title)}  {newline}"
            md_path.write_text("".join(lines), encoding="utf-8")
            return True

    return False
