"""Read-only bridge-code dictionary and its JSON artifact loader."""

from __future__ import annotations

import json
import os
from importlib import resources
from pathlib import Path
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

from ..utils.observability import get_logger
from .systems import BRIDGE_ALPHABET, SystemLike, available_systems, get_system

DICTIONARY_ENV = "MNEMONIC_PEGS_DICTIONARY"
DEMO_DICTIONARY_RESOURCE = "dictionary-demo.json"
METADATA_PREFIX = "_"

_BRIDGE_SYMBOLS = frozenset(BRIDGE_ALPHABET)

PrefixMatch = Tuple[str, Tuple[str, ...]]


class DictionaryLoadError(RuntimeError):
    """Raised when the dictionary artifact cannot be read or parsed."""


class BridgeDictionary:
    """Immutable mapping from bridge codes to pre-ranked candidate words.

    Words are stored in artifact order, which is their mnemonic-quality rank.
    The digit form of every code is computed once per registered system so
    prefix lookups only compare strings.
    """

    def __init__(self, entries: Mapping[str, Iterable[str]]) -> None:
        logger = get_logger(__name__).bind(component="bridge_dictionary")
        codes: Dict[str, Tuple[str, ...]] = {}
        skipped: List[str] = []

        for code, words in entries.items():
            if not code or code.startswith(METADATA_PREFIX):
                continue
            if not set(code) <= _BRIDGE_SYMBOLS:
                skipped.append(code)
                continue
            ranked = tuple(str(word) for word in words if word)
            if ranked:
                codes[code] = ranked

        if skipped:
            logger.warning(
                "Ignoring keys outside the bridge alphabet",
                context={"count": len(skipped), "sample": skipped[:5]},
            )

        self._entries: Mapping[str, Tuple[str, ...]] = MappingProxyType(codes)
        self._max_code_length = max((len(code) for code in codes), default=0)
        self._digit_forms: Mapping[str, Tuple[Tuple[str, str], ...]] = MappingProxyType(
            {
                system.id.value: tuple(
                    (system.bridge_code_to_digits(code), code) for code in codes
                )
                for system in available_systems()
            }
        )

    # Mapping-like helpers --------------------------------------------------
    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, code: object) -> bool:
        return code in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def codes(self) -> Tuple[str, ...]:
        return tuple(self._entries)

    def words_for_code(self, code: str) -> Tuple[str, ...]:
        return self._entries.get(code, ())

    @property
    def max_code_length(self) -> int:
        """Length of the longest bridge code, which bounds any single word."""

        return self._max_code_length

    # Lookups ---------------------------------------------------------------
    def lookup_exact(self, digits: str, system: SystemLike) -> Tuple[str, ...]:
        """Return the ranked words whose bridge code spells ``digits``."""

        if not digits:
            return ()
        code = get_system(system).digits_to_bridge_code(digits)
        if len(code) != len(digits):
            return ()
        return self._entries.get(code, ())

    def lookup_prefixes(self, digits: str, system: SystemLike) -> List[PrefixMatch]:
        """Return ``(matched_digits, words)`` for every code prefixing ``digits``.

        Longer matches come first; equal lengths keep artifact order.
        """

        if not digits:
            return []

        resolved = get_system(system)
        forms = self._digit_forms.get(resolved.id.value)
        if forms is None:
            forms = tuple((resolved.bridge_code_to_digits(code), code) for code in self._entries)

        matches = [
            (code_digits, self._entries[code])
            for code_digits, code in forms
            if code_digits and digits.startswith(code_digits)
        ]
        matches.sort(key=lambda match: len(match[0]), reverse=True)
        return matches


class BridgeDictionaryLoader:
    """Lazy loader for the JSON dictionary artifact.

    A successful load is cached for the life of the loader. A failed load
    raises :class:`DictionaryLoadError` and the next call tries again, so a
    caller can surface the failure and offer a retry.
    """

    def __init__(self, path: Optional[Path | str] = None) -> None:
        self.path: Optional[Path] = Path(path) if path is not None else None
        self._dictionary: Optional[BridgeDictionary] = None
        self._logger = get_logger(__name__).bind(
            component="dictionary_loader",
            path=str(self.path) if self.path else DEMO_DICTIONARY_RESOURCE,
        )

    @classmethod
    def from_environment(cls) -> "BridgeDictionaryLoader":
        return cls(os.environ.get(DICTIONARY_ENV) or None)

    @property
    def loaded(self) -> bool:
        return self._dictionary is not None

    def _read_text(self) -> str:
        if self.path is None:
            return (
                resources.files("mnemonic_pegs.data")
                .joinpath(DEMO_DICTIONARY_RESOURCE)
                .read_text(encoding="utf-8")
            )
        return self.path.read_text(encoding="utf-8")

    def load(self) -> BridgeDictionary:
        if self._dictionary is not None:
            return self._dictionary

        try:
            payload = json.loads(self._read_text())
        except (OSError, UnicodeDecodeError) as exc:
            self._logger.error("Dictionary artifact unreadable", context={"error": str(exc)})
            raise DictionaryLoadError(f"Failed to load dictionary: {exc}") from exc
        except json.JSONDecodeError as exc:
            self._logger.error("Dictionary artifact is not valid JSON", context={"error": str(exc)})
            raise DictionaryLoadError(f"Dictionary is not valid JSON: {exc}") from exc

        if not isinstance(payload, dict):
            raise DictionaryLoadError("Dictionary artifact must be a JSON object")

        entries = {
            str(code): words
            for code, words in payload.items()
            if isinstance(words, list)
        }
        self._dictionary = BridgeDictionary(entries)
        self._logger.info(
            "Dictionary loaded",
            context={"bridge_codes": len(self._dictionary)},
        )
        return self._dictionary


def load_default_dictionary() -> BridgeDictionary:
    """Load the artifact named by ``MNEMONIC_PEGS_DICTIONARY`` or the bundled demo."""

    return BridgeDictionaryLoader.from_environment().load()


__all__ = [
    "BridgeDictionary",
    "BridgeDictionaryLoader",
    "DICTIONARY_ENV",
    "DictionaryLoadError",
    "PrefixMatch",
    "load_default_dictionary",
]
