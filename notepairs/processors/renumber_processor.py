"""Bulk renumbering of short/full directory pairs.

A renumber spec is a ``|`` separated list of ``source-destination`` mappings::

    005..010-100|020--021

Sources are a single index (``020``) or an index range (``005..010``, or
``005..`` for every index from 005 on). ``--`` instead of ``-`` swaps the two
sides. Renames run in two phases through temporary names that start with the
join string, which no valid entry name does, so no two live entries ever share
a name.
"""

import re
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from notepairs.config import NotebookConfig
from notepairs.errors import ClassificationError, InvalidRenumberSpecError, RenumberCollisionError, ValidationError
from notepairs.models.entries import ClassifiedEntry, EntryRole
from notepairs.models.renumber import RenamePlan, RenamePlanEntry, RenumberRange
from notepairs.processors.name_grammar import classify_raw, full_name, short_name
from notepairs.processors.notebook_scanner import list_entries


console = Console()

MAPPING_SEPARATOR = "|"
SWAP_SEPARATOR = "--"
DEST_SEPARATOR = "-"

RANGE_SPEC_PATTERN = re.compile(r"^(?P<start>\d+)(?:(?P<range>\.\.)(?P<end>\d*))?$")


def _parse_range_spec(text: str, token: str) -> tuple[str, str | None, bool]:
    match = RANGE_SPEC_PATTERN.match(text.strip())
    if match is None:
        raise InvalidRenumberSpecError(token, f"'{text}' is not an index or an index range")

    is_range = match.group("range") is not None
    end = match.group("end") or None
    return match.group("start"), end, is_range


def parse_renumber_spec(raw: str) -> list[RenumberRange]:
    """Parse the index-range mini-language.

    Args:
        raw: Spec string such as ``005..010-100|020--021``.

    Returns:
        One RenumberRange per ``|`` separated mapping.

    Raises:
        InvalidRenumberSpecError: If a mapping does not split into exactly two
            dash separated parts, a part is not an index or index range, or
            the destination is a range.
    """
    if not raw.strip():
        raise InvalidRenumberSpecError(raw, "the spec is empty")

    ranges: list[RenumberRange] = []

    for token in raw.split(MAPPING_SEPARATOR):
        token = token.strip()
        is_swap = SWAP_SEPARATOR in token
        parts = token.split(SWAP_SEPARATOR if is_swap else DEST_SEPARATOR)

        if len(parts) != 2:
            raise InvalidRenumberSpecError(token, "expected exactly two dash separated parts")

        source_start, source_end, is_source_range = _parse_range_spec(parts[0], token)
        dest_start, _, is_dest_range = _parse_range_spec(parts[1], token)

        if is_dest_range:
            raise InvalidRenumberSpecError(token, "the destination must be a single index")

        ranges.append(
            RenumberRange(
                source_start=source_start,
                source_end=source_end,
                is_source_range=is_source_range,
                dest_start=dest_start,
                is_swap=is_swap,
            )
        )

    return ranges


def increment_idx(idx_string: str, ascending: bool = True) -> str:
    """Add (or subtract) one to the number in an index string, keeping its zero padding.

    Raises:
        ValidationError: If decrementing would go below zero.
    """
    number = int(idx_string) + (1 if ascending else -1)
    if number < 0:
        raise ValidationError(f"Cannot decrement index '{idx_string}' below zero")
    return str(number).zfill(len(idx_string))


class RenumberProcessor:
    """Renumbers the note item pairs of one directory."""

    def __init__(self, config: NotebookConfig, verbose: bool = False) -> None:
        self.config = config
        self.verbose = verbose

    def _classify_dirs(self, dir_path: Path) -> list[ClassifiedEntry]:
        return [classify_raw(entry, self.config) for entry in list_entries(dir_path) if entry.is_folder]

    def _pair_lookup(self, entries: list[ClassifiedEntry]) -> dict[str, tuple[ClassifiedEntry, ClassifiedEntry]]:
        """Map index strings to their (short, full) folders.

        Short folders without exactly one full name folder are left out.
        """
        full_dirs: dict[str, list[ClassifiedEntry]] = {}
        for entry in entries:
            if entry.role == EntryRole.FULL_NAME_DIR:
                full_dirs.setdefault(entry.idx_string or "", []).append(entry)

        lookup: dict[str, tuple[ClassifiedEntry, ClassifiedEntry]] = {}
        for entry in entries:
            if entry.role != EntryRole.SHORT_NAME_DIR:
                continue
            matches = full_dirs.get(entry.idx_string or "", [])
            if len(matches) == 1:
                lookup[entry.idx_string or ""] = (entry, matches[0])

        return lookup

    def _resolve_sources(self, rng: RenumberRange, known: list[str], sort_ascending: bool) -> list[str]:
        """Source indices of one range, in scan order.

        Raises:
            InvalidRenumberSpecError: If a closed range runs against the scan
                order.
        """
        if not rng.is_source_range:
            return [rng.source_start]

        if rng.source_end is not None and rng.source_end != rng.source_start:
            if (rng.source_end > rng.source_start) != sort_ascending:
                order = "ascending" if sort_ascending else "descending"
                raise InvalidRenumberSpecError(str(rng), f"the source range must be written in {order} order")

        def in_range(idx: str) -> bool:
            if sort_ascending:
                return idx >= rng.source_start and (rng.source_end is None or idx <= rng.source_end)
            return idx <= rng.source_start and (rng.source_end is None or idx >= rng.source_end)

        return [idx for idx in known if in_range(idx)]

    def _assign(
        self,
        ranges: list[RenumberRange],
        lookup: dict[str, tuple[ClassifiedEntry, ClassifiedEntry]],
        sort_ascending: bool,
    ) -> list[tuple[str, str]]:
        known = sorted(lookup, reverse=not sort_ascending)
        assignments: list[tuple[str, str]] = []

        for rng in ranges:
            forward: list[tuple[str, str]] = []
            dest = rng.dest_start

            for ix, source in enumerate(self._resolve_sources(rng, known, sort_ascending)):
                if ix > 0:
                    dest = increment_idx(dest, sort_ascending)
                forward.append((source, dest))

            assignments.extend(forward)

            if rng.is_swap:
                assignments.extend((dest, source) for source, dest in forward if dest in lookup and dest != source)

        return assignments

    def _validate(
        self,
        dir_path: Path,
        assignments: list[tuple[str, str]],
        entries: list[ClassifiedEntry],
        lookup: dict[str, tuple[ClassifiedEntry, ClassifiedEntry]],
    ) -> None:
        """Reject batches that would lose or overwrite a pair.

        Raises:
            ClassificationError: If a source index has no short/full folder pair.
            RenumberCollisionError: If sources or destinations repeat, or a
                destination is held by a folder outside the batch.
        """
        sources: set[str] = set()
        destinations: set[str] = set()

        for source, dest in assignments:
            if source not in lookup:
                raise ClassificationError(
                    f"No short name dir with a single matching full name dir for index '{source}': {{path}}",
                    dir_path,
                )
            if source in sources:
                raise RenumberCollisionError(f"Index '{source}' is renumbered more than once")
            if dest in destinations:
                raise RenumberCollisionError(f"Index '{dest}' is assigned to more than one entry")
            sources.add(source)
            destinations.add(dest)

        moving_names = {name for source in sources for name in (lookup[source][0].name, lookup[source][1].name)}
        stationary = [entry for entry in entries if entry.name not in moving_names]
        stationary_idxes = {
            entry.idx_string for entry in stationary if entry.role in (EntryRole.SHORT_NAME_DIR, EntryRole.FULL_NAME_DIR)
        }

        for dest in destinations:
            if dest in stationary_idxes:
                raise RenumberCollisionError(
                    f"Index '{dest}' is already used by an entry that is not renumbered: {dir_path}"
                )

    def _plan_entry(
        self,
        dir_path: Path,
        source: str,
        dest: str,
        lookup: dict[str, tuple[ClassifiedEntry, ClassifiedEntry]],
    ) -> RenamePlanEntry:
        join_str = self.config.join_str
        short_entry, full_entry = lookup[source]

        new_short_name = short_name(dest, self.config)
        new_full_name = full_name(new_short_name, full_entry.title_fragment or "", self.config)
        temp_short_name = f"{join_str}{short_entry.name}"
        temp_full_name = f"{join_str}{full_entry.name}"

        return RenamePlanEntry(
            idx_string=source,
            new_idx_string=dest,
            short_name=short_entry.name,
            temp_short_name=temp_short_name,
            new_short_name=new_short_name,
            full_name=full_entry.name,
            temp_full_name=temp_full_name,
            new_full_name=new_full_name,
            short_path=dir_path / short_entry.name,
            temp_short_path=dir_path / temp_short_name,
            new_short_path=dir_path / new_short_name,
            full_path=dir_path / full_entry.name,
            temp_full_path=dir_path / temp_full_name,
            new_full_path=dir_path / new_full_name,
        )

    def plan(self, dir_path: Path, ranges: list[RenumberRange], sort_ascending: bool = True) -> RenamePlan:
        """Build and validate the rename plan without touching the filesystem.

        Args:
            dir_path: Directory holding the short/full folder pairs.
            ranges: Parsed renumber mappings.
            sort_ascending: Scan order of the indices; also the direction
                destination indices advance in.

        Returns:
            A RenamePlan with one entry per renamed pair.

        Raises:
            ClassificationError: If a source index has no pair.
            InvalidRenumberSpecError: If a source range runs against the scan order.
            RenumberCollisionError: If the assignment is not injective or clashes
                with existing folders.
        """
        entries = self._classify_dirs(dir_path)
        lookup = self._pair_lookup(entries)
        assignments = self._assign(ranges, lookup, sort_ascending)

        self._validate(dir_path, assignments, entries, lookup)

        plan = RenamePlan(
            dir_path=dir_path,
            entries=[self._plan_entry(dir_path, source, dest, lookup) for source, dest in assignments],
        )

        existing_names = {entry.name for entry in entries}
        for entry in plan.entries:
            for temp_name in (entry.temp_short_name, entry.temp_full_name):
                if temp_name in existing_names:
                    raise RenumberCollisionError(f"Temporary folder already exists: {dir_path / temp_name}")

        return plan

    def apply(self, plan: RenamePlan) -> None:
        """Execute a plan: every folder to its temporary name, then every temporary name to its final name."""
        for entry in plan.entries:
            entry.short_path.rename(entry.temp_short_path)
            entry.full_path.rename(entry.temp_full_path)

        for entry in plan.entries:
            entry.temp_short_path.rename(entry.new_short_path)
            entry.temp_full_path.rename(entry.new_full_path)

            if self.verbose:
                console.print(f"[cyan]{escape(entry.full_name)}[/cyan] -> [green]{escape(entry.new_full_name)}[/green]")

    def renumber(self, dir_path: Path, ranges: list[RenumberRange], sort_ascending: bool = True) -> RenamePlan:
        """Plan and apply a renumbering batch."""
        plan = self.plan(dir_path, ranges, sort_ascending)
        self.apply(plan)
        return plan
