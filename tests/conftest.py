import sys
from pathlib import Path

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from mnemonic_pegs.core import MAJOR_SYSTEM, BridgeDictionary, Peg


BASE_ENTRIES = {
    "_metadata": "Test fixture, CC-BY",
    "D": ["tea", "toe"],
    "N": ["hen"],
    "M": ["ham", "emu"],
    "K": ["key"],
    "DN": ["tin", "town"],
    "NM": ["name"],
    "DK": ["dog", "duck"],
    "DNM": ["denim"],
    "DM": ["time", "dome"],
    "MN": ["moon"],
    "KL": ["coal"],
}


@pytest.fixture
def base_entries():
    return dict(BASE_ENTRIES)


@pytest.fixture
def dictionary():
    """Small dictionary whose words all spell their codes under the Major system."""

    return BridgeDictionary(BASE_ENTRIES)


@pytest.fixture
def major():
    return MAJOR_SYSTEM


@pytest.fixture
def dock_peg():
    return Peg.create("17", ["dock"], "major")
