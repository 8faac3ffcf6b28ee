"""Mnemonic peg finder: turn digit strings into memorable words."""

from .core import (
    BridgeDictionary,
    MatchCandidate,
    MnemonicSystem,
    Peg,
    SystemId,
    encode,
    get_system,
)

__version__ = "0.1.0"

__all__ = [
    "BridgeDictionary",
    "MatchCandidate",
    "MnemonicSystem",
    "Peg",
    "SystemId",
    "encode",
    "get_system",
    "__version__",
]
