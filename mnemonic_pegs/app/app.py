"""Application wiring for the mnemonic peg finder."""

from __future__ import annotations

from typing import List, Optional, Sequence

from mnemonic_pegs.core import (
    BridgeDictionary,
    BridgeDictionaryLoader,
    MatchCandidate,
    Peg,
    SearchWeights,
    encode,
    get_system,
    validate_peg,
)
from mnemonic_pegs.core.coverage_search import DEFAULT_SEARCH_WEIGHTS
from mnemonic_pegs.core.systems import SystemLike
from mnemonic_pegs.utils.observability import get_logger

from .data.peg_store import JsonPegRepository
from .services.match_service import MatchService, SplitRow, clean_digits


class MnemonicPegsApp:
    """Facade bundling the dictionary loader, peg store and match service.

    The dictionary is loaded on first use; a :class:`DictionaryLoadError`
    propagates to the caller, which may retry by calling again.
    """

    def __init__(
        self,
        *,
        loader: Optional[BridgeDictionaryLoader] = None,
        peg_repository: Optional[JsonPegRepository] = None,
        weights: SearchWeights = DEFAULT_SEARCH_WEIGHTS,
    ) -> None:
        self.loader = loader or BridgeDictionaryLoader.from_environment()
        self.peg_repository = peg_repository or JsonPegRepository.from_environment()
        self.weights = weights
        self._service: Optional[MatchService] = None
        self._logger = get_logger(__name__).bind(component="app_facade")

    @property
    def service(self) -> MatchService:
        if self._service is None:
            dictionary: BridgeDictionary = self.loader.load()
            self._service = MatchService(dictionary, weights=self.weights)
            self._logger.info("Match service ready", context={"bridge_codes": len(dictionary)})
        return self._service

    # Public API ------------------------------------------------------------
    def search(self, raw_digits: str, system: SystemLike) -> List[MatchCandidate]:
        digits = clean_digits(raw_digits)
        return self.service.match_full(digits, system, self.peg_repository.pegs_for_system(system))

    def split_rows(self, raw_digits: str, system: SystemLike) -> List[SplitRow]:
        digits = clean_digits(raw_digits)
        return self.service.build_split_rows(
            digits, system, self.peg_repository.pegs_for_system(system)
        )

    def encode(self, word: str, system: SystemLike) -> str:
        return encode(word, system)

    def add_peg(
        self,
        raw_digits: str,
        words: Sequence[str],
        system: SystemLike,
    ) -> tuple[Peg, List[str]]:
        """Store a peg and return it with any advisory warnings.

        A peg whose words do not spell its digits is still stored.
        """

        digits = clean_digits(raw_digits)
        if not digits or not words:
            raise ValueError("A peg needs digits and at least one word")

        resolved = get_system(system)
        warnings: List[str] = []
        if len(words) == 1:
            warning = validate_peg(digits, words[0], resolved)
            if warning:
                warnings.append(warning)
        else:
            spelled = "".join(encode(word, resolved) for word in words)
            if spelled != digits:
                warnings.append(
                    f'"{" ".join(words)}" normally maps to "{spelled}" in {resolved.name}, '
                    f'not "{digits}"'
                )

        peg = self.peg_repository.add_peg(digits, words, resolved)
        if warnings:
            self._logger.warning(
                "Inconsistent peg stored",
                context={"digits": digits, "words": list(words), "system": resolved.id.value},
            )
        return peg, warnings


__all__ = ["MnemonicPegsApp"]
