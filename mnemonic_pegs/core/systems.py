"""Mnemonic system tables and phonetic word encoding.

A mnemonic system assigns consonant sounds to the digits 0-9. Each system also
fixes how the ten bridge-code classes map onto digits, which is what lets one
system-agnostic dictionary serve every system.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple, Union

DIGITS: Tuple[str, ...] = tuple("0123456789")

# D=t/d, N=n, M=m, R=r, L=l, J=ch/sh/j/zh, K=k/g, F=f/v, P=p/b, S=s/z
BRIDGE_ALPHABET = "DNMRLJKFPS"

# Tried in order at each position, trigraphs before digraphs.
MULTI_LETTER_PATTERNS: Tuple[str, ...] = (
    "sch",
    "tch",
    "dge",
    "ck",
    "ph",
    "th",
    "ch",
    "sh",
    "sc",
    "ss",
    "ge",
    "dg",
)

_MAX_PATTERN_LENGTH = 4


class SystemId(str, Enum):
    """Identifiers of the supported mnemonic systems."""

    MAJOR = "major"
    DO_RE_MAJOR = "do-re-major"


class SystemConfigurationError(ValueError):
    """Raised when a system table is incomplete or ambiguous."""


class UnknownSystemError(KeyError):
    """Raised when a system id is not registered."""


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True, eq=False)
class MnemonicSystem:
    """A validated digit to consonant-pattern table."""

    id: SystemId
    name: str
    description: str
    digit_to_consonants: Mapping[str, Tuple[str, ...]]
    digit_to_bridge: Mapping[str, str]
    consonant_to_digit: Mapping[str, str] = field(init=False, repr=False)
    bridge_to_digit: Mapping[str, str] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        consonants = {
            str(digit): tuple(pattern.lower() for pattern in patterns)
            for digit, patterns in self.digit_to_consonants.items()
        }
        bridges = {str(digit): str(code) for digit, code in self.digit_to_bridge.items()}

        missing = [digit for digit in DIGITS if not consonants.get(digit)]
        if missing or set(consonants) - set(DIGITS):
            raise SystemConfigurationError(
                f"{self.id}: every digit 0-9 needs at least one consonant pattern "
                f"(missing: {', '.join(missing) or 'none'})"
            )

        inverse: Dict[str, str] = {}
        for digit in DIGITS:
            for pattern in consonants[digit]:
                if not pattern.isalpha() or not 1 <= len(pattern) <= _MAX_PATTERN_LENGTH:
                    raise SystemConfigurationError(
                        f"{self.id}: invalid consonant pattern {pattern!r} for digit {digit}"
                    )
                owner = inverse.get(pattern)
                if owner is not None and owner != digit:
                    raise SystemConfigurationError(
                        f"{self.id}: pattern {pattern!r} claimed by digits {owner} and {digit}"
                    )
                inverse[pattern] = digit

        if set(bridges) != set(DIGITS) or sorted(bridges.values()) != sorted(BRIDGE_ALPHABET):
            raise SystemConfigurationError(
                f"{self.id}: digit to bridge table must map 0-9 onto {BRIDGE_ALPHABET}"
            )

        object.__setattr__(self, "digit_to_consonants", _freeze(consonants))
        object.__setattr__(self, "digit_to_bridge", _freeze(bridges))
        object.__setattr__(self, "consonant_to_digit", _freeze(inverse))
        object.__setattr__(
            self,
            "bridge_to_digit",
            _freeze({code: digit for digit, code in bridges.items()}),
        )

    def digits_to_bridge_code(self, digits: str) -> str:
        mapping = self.digit_to_bridge
        return "".join(mapping.get(digit, "") for digit in digits)

    def bridge_code_to_digits(self, code: str) -> str:
        mapping = self.bridge_to_digit
        return "".join(mapping.get(symbol, "") for symbol in code)


MAJOR_SYSTEM = MnemonicSystem(
    id=SystemId.MAJOR,
    name="Major System",
    description="The classic phonetic number system used since the 17th century",
    digit_to_consonants={
        "0": ("s", "z", "ss", "sc"),
        "1": ("t", "d", "th"),
        "2": ("n",),
        "3": ("m",),
        "4": ("r",),
        "5": ("l",),
        "6": ("j", "ch", "sh", "ge", "dg"),
        "7": ("k", "g", "c", "q", "ck", "x"),
        "8": ("f", "v", "ph"),
        "9": ("p", "b"),
    },
    digit_to_bridge={
        "0": "S", "1": "D", "2": "N", "3": "M", "4": "R",
        "5": "L", "6": "J", "7": "K", "8": "F", "9": "P",
    },
)

DO_RE_MAJOR_SYSTEM = MnemonicSystem(
    id=SystemId.DO_RE_MAJOR,
    name="Do-Re-Major",
    description="A musical variant using intuitive consonant associations",
    digit_to_consonants={
        "0": ("n",),
        "1": ("d", "t", "th"),
        "2": ("r",),
        "3": ("m",),
        "4": ("f", "ph", "v"),
        "5": ("s", "z", "ss", "sc"),
        "6": ("l",),
        "7": ("k", "g", "c", "q", "ck", "x"),
        "8": ("ch", "j", "sh", "ge", "dg"),
        "9": ("p", "b"),
    },
    digit_to_bridge={
        "0": "N", "1": "D", "2": "R", "3": "M", "4": "F",
        "5": "S", "6": "L", "7": "K", "8": "J", "9": "P",
    },
)

_REGISTRY: Mapping[SystemId, MnemonicSystem] = MappingProxyType(
    {system.id: system for system in (MAJOR_SYSTEM, DO_RE_MAJOR_SYSTEM)}
)

SystemLike = Union[MnemonicSystem, SystemId, str]


def get_system(system: SystemLike) -> MnemonicSystem:
    """Resolve a system, its id or the id's string value."""

    if isinstance(system, MnemonicSystem):
        return system
    try:
        return _REGISTRY[SystemId(system)]
    except ValueError:
        raise UnknownSystemError(system) from None


def available_systems() -> Tuple[MnemonicSystem, ...]:
    return tuple(_REGISTRY.values())


def encode(word: str, system: SystemLike) -> str:
    """Return the digit string a word spells under ``system``.

    Doubled mapped consonants count once, registered digraphs and trigraphs
    win over single letters, and vowels or unmapped letters emit nothing.
    """

    table = get_system(system).consonant_to_digit
    text = (word or "").lower()
    digits = []
    index = 0

    while index < len(text):
        char = text[index]
        if index > 0 and char == text[index - 1] and char in table:
            index += 1
            continue

        for pattern in MULTI_LETTER_PATTERNS:
            if pattern in table and text.startswith(pattern, index):
                digits.append(table[pattern])
                index += len(pattern)
                break
        else:
            digit = table.get(char)
            if digit is not None:
                digits.append(digit)
            index += 1

    return "".join(digits)


def digits_to_bridge_code(digits: str, system: SystemLike) -> str:
    return get_system(system).digits_to_bridge_code(digits)


def bridge_code_to_digits(code: str, system: SystemLike) -> str:
    return get_system(system).bridge_code_to_digits(code)


def validate_peg(digits: str, word: str, system: SystemLike) -> Optional[str]:
    """Return an advisory warning when ``word`` does not spell ``digits``.

    Inconsistent pegs are still honoured by the engine; the warning is only
    meant for the input boundary.
    """

    if not digits or not word:
        return None

    resolved = get_system(system)
    expected = encode(word, resolved)
    if expected == digits:
        return None
    if expected:
        return (
            f'"{word}" normally maps to "{expected}" in {resolved.name}, '
            f'not "{digits}"'
        )
    return f'"{word}" has no consonants that map to digits'


__all__ = [
    "BRIDGE_ALPHABET",
    "DIGITS",
    "DO_RE_MAJOR_SYSTEM",
    "MAJOR_SYSTEM",
    "MULTI_LETTER_PATTERNS",
    "MnemonicSystem",
    "SystemConfigurationError",
    "SystemId",
    "SystemLike",
    "UnknownSystemError",
    "available_systems",
    "bridge_code_to_digits",
    "digits_to_bridge_code",
    "encode",
    "get_system",
    "validate_peg",
]
