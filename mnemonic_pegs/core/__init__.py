"""Digit-to-word matching engine."""

from .assembler import assemble_matches, rank_candidates, segment_matches
from .bridge_dictionary import (
    BridgeDictionary,
    BridgeDictionaryLoader,
    DictionaryLoadError,
    load_default_dictionary,
)
from .candidates import MatchCandidate, Peg, pegs_for_system
from .coverage_search import (
    DEFAULT_SEARCH_WEIGHTS,
    SearchWeights,
    build_edge_map,
    find_full_coverages,
    find_partial_coverages,
)
from .diversifier import are_similar, diversify
from .segmenter import DigitSegmentation, display_segmentations, iter_segmentations, segment
from .systems import (
    BRIDGE_ALPHABET,
    DO_RE_MAJOR_SYSTEM,
    MAJOR_SYSTEM,
    MnemonicSystem,
    SystemConfigurationError,
    SystemId,
    UnknownSystemError,
    available_systems,
    encode,
    get_system,
    validate_peg,
)

__all__ = [
    "BRIDGE_ALPHABET",
    "BridgeDictionary",
    "BridgeDictionaryLoader",
    "DEFAULT_SEARCH_WEIGHTS",
    "DO_RE_MAJOR_SYSTEM",
    "DictionaryLoadError",
    "DigitSegmentation",
    "MAJOR_SYSTEM",
    "MatchCandidate",
    "MnemonicSystem",
    "Peg",
    "SearchWeights",
    "SystemConfigurationError",
    "SystemId",
    "UnknownSystemError",
    "are_similar",
    "assemble_matches",
    "available_systems",
    "build_edge_map",
    "display_segmentations",
    "diversify",
    "encode",
    "find_full_coverages",
    "find_partial_coverages",
    "get_system",
    "iter_segmentations",
    "load_default_dictionary",
    "pegs_for_system",
    "rank_candidates",
    "segment",
    "segment_matches",
    "validate_peg",
]
