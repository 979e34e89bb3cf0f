"""Tests for the renumber spec parser and RenumberProcessor."""

import pytest

from notepairs.config import NotebookConfig
from notepairs.errors import ClassificationError, InvalidRenumberSpecError, RenumberCollisionError, ValidationError
from notepairs.processors.renumber_processor import RenumberProcessor, increment_idx, parse_renumber_spec
from notepairs.tests.fs_helpers import make_pair


@pytest.fixture
def processor(config):
    return RenumberProcessor(config)


def dir_names(path):
    return sorted(child.name for child in path.iterdir())


class TestParseRenumberSpec:
    """Tests for parse_renumber_spec()."""

    def test_range_and_swap(self):
        """Test a range mapping followed by a swap."""
        ranges = parse_renumber_spec("005..010-100|020--021")

        assert len(ranges) == 2
        first, second = ranges
        assert (first.source_start, first.source_end, first.is_source_range) == ("005", "010", True)
        assert first.dest_start == "100"
        assert not first.is_swap
        assert (second.source_start, second.source_end, second.is_source_range) == ("020", None, False)
        assert second.dest_start == "021"
        assert second.is_swap

    def test_open_range(self):
        """Test a range without an end index."""
        (rng,) = parse_renumber_spec("005..-100")

        assert rng.is_source_range
        assert rng.source_end is None
        assert str(rng) == "005..-100"

    def test_str_round_trip(self):
        """Test that ranges print back in the spec syntax."""
        assert [str(rng) for rng in parse_renumber_spec("005..010-100|020--021")] == ["005..010-100", "020--021"]

    @pytest.mark.parametrize(
        "raw",
        ["", "   ", "005", "abc-001", "005-006-007", "005-", "005-0x1", "1..2..3-4", "005-100..200", "005-100.."],
    )
    def test_invalid_specs(self, raw):
        """Test that malformed specs are rejected."""
        with pytest.raises(InvalidRenumberSpecError):
            parse_renumber_spec(raw)

    def test_destination_range_raises(self):
        """Test that only the source side may be a range."""
        with pytest.raises(InvalidRenumberSpecError, match="destination must be a single index"):
            parse_renumber_spec("005-100..200")

    def test_error_names_token(self):
        """Test that the error message points at the bad token."""
        with pytest.raises(InvalidRenumberSpecError, match="abc-001"):
            parse_renumber_spec("005-006|abc-001")


class TestIncrementIdx:
    """Tests for increment_idx()."""

    @pytest.mark.parametrize(
        "idx,ascending,expected",
        [
            ("005", True, "006"),
            ("009", True, "010"),
            ("099", True, "100"),
            ("999", True, "1000"),
            ("010", False, "009"),
            ("1", False, "0"),
        ],
    )
    def test_keeps_padding(self, idx, ascending, expected):
        """Test that the zero padding width is kept."""
        assert increment_idx(idx, ascending) == expected

    def test_below_zero_raises(self):
        """Test that decrementing zero is rejected."""
        with pytest.raises(ValidationError):
            increment_idx("000", ascending=False)


class TestRenumber:
    """Tests for planning and applying renumber batches."""

    def test_single_move(self, tmp_path, processor):
        """Test moving one pair to a free index."""
        make_pair(tmp_path, "010", "X")

        plan = processor.renumber(tmp_path, parse_renumber_spec("010-020"))

        assert dir_names(tmp_path) == ["020", "020-X"]
        assert (tmp_path / "020" / "X[note].md").is_file()
        assert plan.mapping == {"010": "020"}

    def test_move_onto_index_that_moves_away(self, tmp_path, processor):
        """Test that a destination freed within the same batch is reused."""
        make_pair(tmp_path, "010", "X")
        make_pair(tmp_path, "020", "Y")

        processor.renumber(tmp_path, parse_renumber_spec("010-020|020-030"))

        assert dir_names(tmp_path) == ["020", "020-X", "030", "030-Y"]

    def test_destination_held_by_stationary_pair_raises(self, tmp_path, processor):
        """Test that a pair outside the batch is never overwritten."""
        make_pair(tmp_path, "010", "X")
        make_pair(tmp_path, "020", "Y")
        before = dir_names(tmp_path)

        with pytest.raises(RenumberCollisionError):
            processor.renumber(tmp_path, parse_renumber_spec("010-020"))

        assert dir_names(tmp_path) == before

    def test_shift_range_up_by_one(self, tmp_path, processor):
        """Test shifting consecutive indices onto each other."""
        make_pair(tmp_path, "010", "A")
        make_pair(tmp_path, "011", "B")

        plan = processor.renumber(tmp_path, parse_renumber_spec("010..-011"))

        assert plan.mapping == {"010": "011", "011": "012"}
        assert dir_names(tmp_path) == ["011", "011-A", "012", "012-B"]

    def test_range_with_gaps(self, tmp_path, processor):
        """Test that only existing indices in the range are renumbered, to consecutive destinations."""
        make_pair(tmp_path, "005", "A")
        make_pair(tmp_path, "008", "B")
        make_pair(tmp_path, "012", "C")

        plan = processor.renumber(tmp_path, parse_renumber_spec("005..010-100"))

        assert plan.mapping == {"005": "100", "008": "101"}
        assert dir_names(tmp_path) == ["012", "012-C", "100", "100-A", "101", "101-B"]

    def test_swap(self, tmp_path, processor):
        """Test swapping two pairs."""
        make_pair(tmp_path, "005", "First")
        make_pair(tmp_path, "006", "Second")

        processor.renumber(tmp_path, parse_renumber_spec("005--006"))

        assert dir_names(tmp_path) == ["005", "005-Second", "006", "006-First"]
        assert (tmp_path / "006" / "First[note].md").is_file()
        assert (tmp_path / "005" / "Second[note].md").is_file()

    def test_swap_with_free_index_is_a_move(self, tmp_path, processor):
        """Test that swapping with an unused index just moves the pair."""
        make_pair(tmp_path, "005", "First")

        plan = processor.renumber(tmp_path, parse_renumber_spec("005--009"))

        assert plan.mapping == {"005": "009"}
        assert dir_names(tmp_path) == ["009", "009-First"]

    def test_descending(self, tmp_path, processor):
        """Test that descending order walks the range down and decrements destinations."""
        make_pair(tmp_path, "005", "A")
        make_pair(tmp_path, "006", "B")

        plan = processor.renumber(tmp_path, parse_renumber_spec("010..005-100"), sort_ascending=False)

        assert plan.mapping == {"006": "100", "005": "099"}
        assert dir_names(tmp_path) == ["099", "099-A", "100", "100-B"]

    def test_duplicate_destination_raises_before_any_rename(self, tmp_path, processor):
        """Test that a non injective batch leaves the directory untouched."""
        make_pair(tmp_path, "005", "A")
        make_pair(tmp_path, "006", "B")
        before = dir_names(tmp_path)

        with pytest.raises(RenumberCollisionError):
            processor.renumber(tmp_path, parse_renumber_spec("005-007|006-007"))

        assert dir_names(tmp_path) == before

    def test_duplicate_source_raises(self, tmp_path, processor):
        """Test that an index cannot be renumbered twice in one batch."""
        make_pair(tmp_path, "005", "A")

        with pytest.raises(RenumberCollisionError):
            processor.plan(tmp_path, parse_renumber_spec("005-007|005-008"))

    def test_missing_source_raises(self, tmp_path, processor):
        """Test that a single source index must exist."""
        make_pair(tmp_path, "005", "A")

        with pytest.raises(ClassificationError):
            processor.plan(tmp_path, parse_renumber_spec("099-100"))

    def test_leftover_temp_folder_raises(self, tmp_path, processor):
        """Test that an existing temporary name blocks the batch."""
        make_pair(tmp_path, "005", "A")
        (tmp_path / "-005").mkdir()

        with pytest.raises(RenumberCollisionError):
            processor.plan(tmp_path, parse_renumber_spec("005-006"))

    def test_plan_does_not_rename(self, tmp_path, processor):
        """Test that planning only computes names."""
        make_pair(tmp_path, "005", "A")

        plan = processor.plan(tmp_path, parse_renumber_spec("005-006"))

        assert dir_names(tmp_path) == ["005", "005-A"]
        (entry,) = plan.entries
        assert (entry.temp_short_name, entry.temp_full_name) == ("-005", "-005-A")
        assert (entry.new_short_name, entry.new_full_name) == ("006", "006-A")

    def test_files_pair_is_not_renumbered(self, tmp_path, processor):
        """Test that ranges only cover note item pairs."""
        make_pair(tmp_path, "001", "A")
        (tmp_path / "_001").mkdir()
        (tmp_path / "_001-[note-files]").mkdir()

        processor.renumber(tmp_path, parse_renumber_spec("000..-002"))

        assert dir_names(tmp_path) == ["002", "002-A", "_001", "_001-[note-files]"]

    def test_zero_padded_indices_with_custom_internal_prefix(self, tmp_path):
        """Test that zero padded pairs stay note items when the files pair uses another prefix."""
        processor = RenumberProcessor(NotebookConfig(note_internal_dir_names_prefix="x"))
        make_pair(tmp_path, "005", "A")
        (tmp_path / "x001").mkdir()
        (tmp_path / "x001-[note-files]").mkdir()

        plan = processor.renumber(tmp_path, parse_renumber_spec("005-006"))

        assert plan.mapping == {"005": "006"}
        assert dir_names(tmp_path) == ["006", "006-A", "x001", "x001-[note-files]"]

    @pytest.mark.parametrize("raw,sort_ascending", [("005..010-100", False), ("010..005-100", True)])
    def test_range_against_scan_order_raises(self, tmp_path, processor, raw, sort_ascending):
        """Test that a closed range written against the scan order is rejected before any rename."""
        make_pair(tmp_path, "005", "A")
        make_pair(tmp_path, "008", "B")
        before = dir_names(tmp_path)

        with pytest.raises(InvalidRenumberSpecError, match="order"):
            processor.renumber(tmp_path, parse_renumber_spec(raw), sort_ascending=sort_ascending)

        assert dir_names(tmp_path) == before
