"""Batch planning: split discovered files into fixed-size output groups."""

import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple

from .models import FileRecord

_INVALID_FILENAME_CHARS = re.compile(r'[<>:"/\\|?*\x00-\x1f]')


@dataclass(frozen=True)
class Batch:
    number: int
    records: Tuple[FileRecord, ...]
    output_name: str

    def __len__(self) -> int:
        return len(self.records)


def sanitize_filename(name: str) -> str:
    """Replace characters that are not allowed in file names with underscores."""
    return _INVALID_FILENAME_CHARS.sub("_", name)


def batch_filename(label: str, slice_count: int, batch_number: int) -> str:
    return f"{sanitize_filename(label)}_{slice_count}slices_batch{batch_number:03d}.wav"


def plan_batches(
    records: Sequence[FileRecord],
    slice_count: int,
    label: str
) -> List[Batch]:
    """
    Partition records, in order, into batches of ``slice_count``.

    The final batch holds the remainder. Batches are numbered from 1.
    """
    if slice_count < 1:
        raise ValueError(f"slice count must be positive, got {slice_count}")

    batches = []
    for start in range(0, len(records), slice_count):
        number = len(batches) + 1
        batches.append(Batch(
            number=number,
            records=tuple(records[start:start + slice_count]),
            output_name=batch_filename(label, slice_count, number),
        ))
    return batches
