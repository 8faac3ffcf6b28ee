import json

import pytest

from mnemonic_pegs.app.cli import EXIT_DICTIONARY_ERROR, EXIT_STORE_ERROR, main
from mnemonic_pegs.core.bridge_dictionary import DICTIONARY_ENV


@pytest.fixture
def peg_args(tmp_path):
    return ["--pegs", str(tmp_path / "pegs.json")]


def test_search_with_bundled_dictionary(monkeypatch, capsys, peg_args):
    monkeypatch.delenv(DICTIONARY_ENV, raising=False)

    assert main([*peg_args, "search", "1-7"]) == 0

    output = capsys.readouterr().out
    assert "Full matches:" in output
    assert "✅ dog  [17]" in output


def test_search_with_splits_and_weights(monkeypatch, capsys, peg_args):
    monkeypatch.delenv(DICTIONARY_ENV, raising=False)

    assert main([*peg_args, "search", "1217", "--splits", "--weights"]) == 0

    output = capsys.readouterr().out
    assert "w=" in output
    assert "12+17" in output


def test_search_without_digits(monkeypatch, capsys, peg_args):
    monkeypatch.delenv(DICTIONARY_ENV, raising=False)

    assert main([*peg_args, "search", "abc"]) == 0
    assert "Enter some digits" in capsys.readouterr().out


def test_encode_prints_digits_per_word(capsys, peg_args):
    assert main([*peg_args, "--system", "do-re-major", "encode", "name", "aeiou"]) == 0

    assert capsys.readouterr().out.splitlines() == ["name: 03", "aeiou: -"]


def test_peg_round_trip(tmp_path, capsys, peg_args):
    dictionary = tmp_path / "dictionary.json"
    dictionary.write_text(json.dumps({"DK": ["dog", "duck"]}), encoding="utf-8")

    assert main([*peg_args, "peg", "add", "71", "Dog"]) == 0
    added = capsys.readouterr().out
    assert added.startswith("⚠️  ")
    assert "📌 71 → dog" in added

    assert main([*peg_args, "peg", "list"]) == 0
    listed = capsys.readouterr().out
    assert "dog" in listed
    peg_id = listed.split()[0]

    assert main([*peg_args, "--dictionary", str(dictionary), "search", "71"]) == 0
    assert "📌 dog  [71]" in capsys.readouterr().out

    assert main([*peg_args, "peg", "remove", peg_id]) == 0
    assert capsys.readouterr().out.strip() == "Peg removed."
    assert main([*peg_args, "peg", "remove", peg_id]) == 0
    assert "No peg with id" in capsys.readouterr().out


def test_peg_list_is_per_system(capsys, peg_args):
    assert main([*peg_args, "peg", "add", "17", "dock"]) == 0
    capsys.readouterr()

    assert main([*peg_args, "--system", "do-re-major", "peg", "list"]) == 0
    assert "No pegs saved" in capsys.readouterr().out


def test_missing_dictionary_exits_with_error(tmp_path, capsys, peg_args):
    missing = tmp_path / "missing.json"

    assert main([*peg_args, "--dictionary", str(missing), "search", "17"]) == EXIT_DICTIONARY_ERROR
    assert "❌" in capsys.readouterr().err


def test_unwritable_peg_store_exits_with_error(tmp_path, capsys):
    blocker = tmp_path / "not-a-directory"
    blocker.write_text("", encoding="utf-8")
    pegs = blocker / "pegs.json"

    assert main(["--pegs", str(pegs), "peg", "add", "17", "dock"]) == EXIT_STORE_ERROR
    assert "Failed to save pegs" in capsys.readouterr().err


def test_corrupt_peg_store_is_kept_and_reported(tmp_path, capsys):
    pegs = tmp_path / "pegs.json"
    pegs.write_text('[{"digits": "17"', encoding="utf-8")

    assert main(["--pegs", str(pegs), "peg", "add", "12", "tin"]) == EXIT_STORE_ERROR
    assert "unreadable" in capsys.readouterr().err
    assert pegs.read_text(encoding="utf-8") == '[{"digits": "17"'


def test_peg_without_digits_is_a_usage_error(peg_args):
    with pytest.raises(SystemExit):
        main([*peg_args, "peg", "add", "abc", "dock"])
