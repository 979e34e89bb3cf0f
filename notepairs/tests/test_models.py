"""Tests for the entry and renumber models."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from notepairs.models.entries import ClassifiedEntry, DirsPair, EntryRole, MatchedPair, RawEntry
from notepairs.models.renumber import RenamePlan, RenumberRange


class TestEntryRole:
    """Tests for EntryRole properties."""

    def test_short_and_full_roles(self):
        assert EntryRole.SHORT_NAME_DIR.is_short_name
        assert EntryRole.FILES_SHORT_NAME_DIR.is_short_name
        assert EntryRole.FULL_NAME_MD_FILE.is_full_name
        assert not EntryRole.NOTE_MD_FILE.is_indexed
        assert not EntryRole.NOTE_FILES_FOLDER.is_indexed
        assert not EntryRole.UNCLASSIFIED.is_indexed


class TestClassifiedEntry:
    """Tests for the ClassifiedEntry invariants."""

    def test_indexed_role_requires_digits(self):
        """Test that indexed roles need a digits-only index string."""
        with pytest.raises(ValidationError):
            ClassifiedEntry(name="abc", role=EntryRole.SHORT_NAME_DIR, is_folder=True, idx_string="abc")

    def test_short_name_has_no_title(self):
        """Test that a short name cannot carry a title fragment."""
        with pytest.raises(ValidationError):
            ClassifiedEntry(
                name="005", role=EntryRole.SHORT_NAME_DIR, is_folder=True, idx_string="005", title_fragment="x"
            )

    def test_full_name_requires_title(self):
        """Test that a full name needs a title fragment."""
        with pytest.raises(ValidationError):
            ClassifiedEntry(name="005-x", role=EntryRole.FULL_NAME_DIR, is_folder=True, idx_string="005")

    def test_unclassified(self):
        entry = ClassifiedEntry(name="Misc", role=EntryRole.UNCLASSIFIED, is_folder=True)

        assert "Misc" in str(entry)
        assert "unclassified" in str(entry)


class TestMatchedPair:
    """Tests for MatchedPair."""

    def test_indices_must_match(self):
        """Test that both entries of a pair share the index."""
        short_entry = ClassifiedEntry(name="005", role=EntryRole.SHORT_NAME_DIR, is_folder=True, idx_string="005")
        full_entry = ClassifiedEntry(
            name="006-x", role=EntryRole.FULL_NAME_DIR, is_folder=True, idx_string="006", title_fragment="x"
        )

        with pytest.raises(ValidationError):
            MatchedPair(short_entry=short_entry, full_entry=full_entry)


class TestRawEntry:
    """Tests for RawEntry."""

    def test_from_path(self, tmp_path):
        (tmp_path / "005").mkdir()

        entry = RawEntry.from_path(tmp_path / "005")

        assert entry.name == "005"
        assert entry.is_folder
        assert entry.full_path == tmp_path / "005"


class TestDirsPair:
    """Tests for DirsPair."""

    def test_files_pair_has_no_md_file(self):
        assert DirsPair(short_path=Path("a"), full_path=Path("a-b")).is_files_pair
        assert not DirsPair(short_path=Path("a"), full_path=Path("a-b"), md_path=Path("a/b.md")).is_files_pair


class TestRenumberRange:
    """Tests for RenumberRange."""

    def test_single_index_cannot_have_end(self):
        with pytest.raises(ValidationError):
            RenumberRange(source_start="005", source_end="010", dest_start="100")

    def test_indices_must_be_digits(self):
        with pytest.raises(ValidationError):
            RenumberRange(source_start="a", dest_start="100")


class TestRenamePlan:
    """Tests for RenamePlan."""

    def test_empty_plan(self, tmp_path):
        plan = RenamePlan(dir_path=tmp_path)

        assert len(plan) == 0
        assert plan.mapping == {}
