"""Enumerate the ways a digit string can be cut into contiguous parts."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import combinations, islice
from typing import Iterator, List, Tuple

DEFAULT_MAX_PARTS = 4
DEFAULT_DISPLAY_SPLITS = 15


@dataclass(frozen=True)
class DigitSegmentation:
    """Contiguous, non-empty parts that concatenate to the original digits."""

    parts: Tuple[str, ...]

    @property
    def pattern(self) -> str:
        return "+".join(self.parts)

    @property
    def spread(self) -> int:
        lengths = [len(part) for part in self.parts]
        return max(lengths) - min(lengths)

    @property
    def digits(self) -> str:
        return "".join(self.parts)


def _cut(digits: str, cuts: Tuple[int, ...]) -> DigitSegmentation:
    bounds = (0,) + cuts + (len(digits),)
    return DigitSegmentation(
        tuple(digits[start:end] for start, end in zip(bounds, bounds[1:]))
    )


def iter_segmentations(
    digits: str,
    max_parts: int = DEFAULT_MAX_PARTS,
) -> Iterator[DigitSegmentation]:
    """Yield every split of ``digits`` into 1..max_parts parts.

    Fewer parts come first; within a part count, splits with a smaller gap
    between the longest and shortest part come first, ties keeping the order
    in which the leading parts grow. The last part always takes whatever
    remains, so every digit is covered.
    """

    if not digits:
        return
    limit = min(max(1, int(max_parts)), len(digits))

    for part_count in range(1, limit + 1):
        batch = [
            _cut(digits, cuts)
            for cuts in combinations(range(1, len(digits)), part_count - 1)
        ]
        batch.sort(key=lambda segmentation: segmentation.spread)
        yield from batch


def segment(digits: str, max_parts: int = DEFAULT_MAX_PARTS) -> List[DigitSegmentation]:
    return list(iter_segmentations(digits, max_parts))


def display_segmentations(
    digits: str,
    max_splits: int = DEFAULT_DISPLAY_SPLITS,
    max_parts: int = DEFAULT_MAX_PARTS,
) -> List[DigitSegmentation]:
    """Return the leading ``max_splits`` segmentations for display."""

    return list(islice(iter_segmentations(digits, max_parts), max(0, int(max_splits))))


__all__ = [
    "DEFAULT_DISPLAY_SPLITS",
    "DEFAULT_MAX_PARTS",
    "DigitSegmentation",
    "display_segmentations",
    "iter_segmentations",
    "segment",
]
