"""Shared dataclasses for pegs and match candidates."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple

from .systems import SystemId, SystemLike, get_system


@dataclass(frozen=True)
class Peg:
    """A user-chosen word sequence pinned to a digit span under one system."""

    digits: str
    words: Tuple[str, ...]
    system: SystemId
    id: Optional[str] = None
    created_at: Optional[int] = None

    @classmethod
    def create(
        cls,
        digits: str,
        words: Sequence[str] | str,
        system: SystemLike,
        *,
        id: Optional[str] = None,
        created_at: Optional[int] = None,
    ) -> "Peg":
        if isinstance(words, str):
            words = [words]
        return cls(
            digits=str(digits),
            words=tuple(str(word) for word in words if word),
            system=get_system(system).id,
            id=id,
            created_at=created_at,
        )

    @classmethod
    def from_record(cls, record: Dict[str, Any]) -> "Peg":
        """Build a peg from a persisted ``{id, digits, words, system, createdAt}`` record."""

        return cls.create(
            record["digits"],
            record.get("words") or (),
            record["system"],
            id=record.get("id"),
            created_at=record.get("createdAt"),
        )

    def to_record(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "digits": self.digits,
            "words": list(self.words),
            "system": self.system.value,
            "createdAt": self.created_at,
        }

    def applies_to(self, system: SystemLike) -> bool:
        return bool(self.digits and self.words) and self.system is get_system(system).id


def pegs_for_system(pegs: Optional[Iterable[Peg]], system: SystemLike) -> Tuple[Peg, ...]:
    """Keep the usable pegs of ``system`` in caller order."""

    if not pegs:
        return ()
    return tuple(peg for peg in pegs if peg.applies_to(system))


@dataclass(frozen=True)
class MatchCandidate:
    """One scored way to realise a digit span as one or more words."""

    words: Tuple[str, ...]
    digits: str
    digits_covered: range
    is_full_match: bool
    weight: float
    is_peg_sourced: bool = False
    _key: Tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_key", tuple(word.lower() for word in self.words))

    @property
    def key(self) -> Tuple[str, ...]:
        """Case-insensitive word sequence used for de-duplication."""

        return self._key

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def phrase(self) -> str:
        return " ".join(self.words)


__all__ = ["MatchCandidate", "Peg", "pegs_for_system"]
