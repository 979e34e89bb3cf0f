"""Pairing of short-name entries with their full-name counterparts."""

from collections.abc import Iterable

from notepairs.errors import AmbiguousMatchError
from notepairs.models.entries import ClassifiedEntry, EntryRole, MatchedPair, NotebookLayout


# Full-name role expected for each short-name role, per scanned layout
COUNTERPART_ROLES: dict[NotebookLayout, dict[EntryRole, EntryRole]] = {
    NotebookLayout.BASIC: {
        EntryRole.SHORT_NAME_DIR: EntryRole.FULL_NAME_MD_FILE,
    },
    NotebookLayout.PAIRED: {
        EntryRole.SHORT_NAME_DIR: EntryRole.FULL_NAME_DIR,
        EntryRole.FILES_SHORT_NAME_DIR: EntryRole.FILES_FULL_NAME_DIR,
    },
}


def is_counterpart(short_entry: ClassifiedEntry, candidate: ClassifiedEntry, layout: NotebookLayout) -> bool:
    """Whether ``candidate`` is the full-name entry ``short_entry`` pairs with.

    The candidate must carry the same index string and the exact role expected
    for the short entry's role: a markdown file in the basic layout, a folder
    of the same kind (note item or note files) in the paired layout.
    """
    expected_role = COUNTERPART_ROLES[layout].get(short_entry.role)
    if expected_role is None:
        return False

    if candidate.role != expected_role or candidate.idx_string != short_entry.idx_string:
        return False

    return candidate.is_folder == (layout == NotebookLayout.PAIRED)


def match(
    short_entries: Iterable[ClassifiedEntry],
    full_candidates: Iterable[ClassifiedEntry],
    layout: NotebookLayout,
) -> list[MatchedPair]:
    """Pair each short-name entry with its unique full-name counterpart.

    Args:
        short_entries: Short-name entries of one directory level.
        full_candidates: Entries of the same level that may be counterparts.
        layout: Layout of the scanned directory.

    Returns:
        One MatchedPair per short entry, in input order.

    Raises:
        AmbiguousMatchError: If a short entry has zero or several counterparts.
    """
    candidates = list(full_candidates)
    pairs: list[MatchedPair] = []

    for short_entry in short_entries:
        matches = [candidate for candidate in candidates if is_counterpart(short_entry, candidate, layout)]

        if len(matches) != 1:
            raise AmbiguousMatchError(short_entry.full_path or short_entry.name, len(matches))

        pairs.append(MatchedPair(short_entry=short_entry, full_entry=matches[0]))

    return pairs
