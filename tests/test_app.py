import json

import pytest

from mnemonic_pegs.app import MnemonicPegsApp
from mnemonic_pegs.app.data.peg_store import JsonPegRepository
from mnemonic_pegs.core import BridgeDictionaryLoader, DictionaryLoadError


@pytest.fixture
def dictionary_path(tmp_path, base_entries):
    path = tmp_path / "dictionary.json"
    path.write_text(json.dumps(base_entries), encoding="utf-8")
    return path


@pytest.fixture
def app(tmp_path, dictionary_path):
    return MnemonicPegsApp(
        loader=BridgeDictionaryLoader(dictionary_path),
        peg_repository=JsonPegRepository(tmp_path / "pegs.json"),
    )


def test_search_cleans_input(app):
    results = app.search("1-7", "major")

    assert [candidate.phrase for candidate in results] == ["dog", "duck", "tea", "toe"]
    assert app.search("no digits", "major") == []


def test_non_ascii_digits_are_dropped_at_the_boundary(app):
    results = app.search("١٧ 12", "major")

    assert results[0].phrase == "tin" and results[0].digits == "12"
    with pytest.raises(ValueError):
        app.add_peg("١٧", ["dock"], "major")


def test_dictionary_is_loaded_lazily(app):
    assert app.encode("dog", "major") == "17"
    app.add_peg("17", ["dock"], "major")
    assert not app.loader.loaded

    app.search("17", "major")
    assert app.loader.loaded


def test_saved_pegs_lead_search_results(app):
    peg, warnings = app.add_peg("17", ["dock"], "major")

    assert warnings == []
    results = app.search("17", "major")
    assert results[0].phrase == "dock" and results[0].is_peg_sourced
    assert app.search("17", "do-re-major")[0].phrase == "dog"
    assert peg.id is not None


def test_inconsistent_single_word_peg_is_stored_with_warning(app):
    peg, warnings = app.add_peg("71", ["dog"], "major")

    assert len(warnings) == 1
    assert '"17"' in warnings[0] and '"71"' in warnings[0]
    assert app.peg_repository.is_peg("71", ["dog"], "major")
    assert peg.digits == "71"


def test_multi_word_pegs_are_checked_as_a_sequence(app):
    _, consistent = app.add_peg("1712", ["dog", "tin"], "major")
    _, inconsistent = app.add_peg("1713", ["dog", "tin"], "major")

    assert consistent == []
    assert len(inconsistent) == 1
    assert '"1712"' in inconsistent[0]


@pytest.mark.parametrize("digits, words", [("abc", ["dock"]), ("17", [])])
def test_add_peg_requires_digits_and_words(app, digits, words):
    with pytest.raises(ValueError):
        app.add_peg(digits, words, "major")


def test_split_rows_use_saved_pegs(app):
    app.add_peg("17", ["dock"], "major")

    rows = app.split_rows("12-17", "major")

    assert rows[0].pattern == "12+17"
    assert rows[0].segments[1].matches[0].phrase == "dock"


def test_failed_dictionary_load_can_be_retried(tmp_path, base_entries):
    path = tmp_path / "late.json"
    app = MnemonicPegsApp(
        loader=BridgeDictionaryLoader(path),
        peg_repository=JsonPegRepository(tmp_path / "pegs.json"),
    )

    with pytest.raises(DictionaryLoadError):
        app.search("17", "major")

    path.write_text(json.dumps(base_entries), encoding="utf-8")
    assert app.search("17", "major")[0].phrase == "dog"
