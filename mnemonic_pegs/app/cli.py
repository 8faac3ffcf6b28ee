"""Command line entry point for the mnemonic peg finder."""

from __future__ import annotations

import argparse
import sys
from typing import List, Optional, Sequence

from mnemonic_pegs.core import (
    BridgeDictionaryLoader,
    DictionaryLoadError,
    SystemId,
    available_systems,
    get_system,
)
from mnemonic_pegs.utils.logging_config import configure_logging

from .app import MnemonicPegsApp
from .data.peg_store import JsonPegRepository, PegStoreError
from .services.match_service import clean_digits
from .services.result_formatter import MatchResultFormatter

EXIT_DICTIONARY_ERROR = 2
EXIT_STORE_ERROR = 3


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mnemonic-pegs",
        description="Turn digit strings into memorable words with phonetic mnemonic systems.",
    )
    parser.add_argument(
        "--system",
        choices=[system.id.value for system in available_systems()],
        default=SystemId.MAJOR.value,
        help="Mnemonic system to use (default: %(default)s)",
    )
    parser.add_argument("--dictionary", help="Path to a bridge-code dictionary JSON file")
    parser.add_argument("--pegs", help="Path to the peg store JSON file")
    parser.add_argument("--log-level", help="Logging level (default: WARNING)")

    commands = parser.add_subparsers(dest="command", required=True)

    search = commands.add_parser("search", help="Find words for a digit string")
    search.add_argument("digits", help="Digits to encode; other characters are ignored")
    search.add_argument("--splits", action="store_true", help="Also show split rows")
    search.add_argument("--weights", action="store_true", help="Show result weights")

    encode = commands.add_parser("encode", help="Show the digits a word spells")
    encode.add_argument("words", nargs="+")

    peg = commands.add_parser("peg", help="Manage pegs")
    peg_commands = peg.add_subparsers(dest="peg_command", required=True)
    add = peg_commands.add_parser("add", help="Pin words to a digit string")
    add.add_argument("digits")
    add.add_argument("words", nargs="+")
    peg_commands.add_parser("list", help="List pegs for the selected system")
    remove = peg_commands.add_parser("remove", help="Remove a peg by id")
    remove.add_argument("peg_id")

    return parser


def _build_app(args: argparse.Namespace) -> MnemonicPegsApp:
    loader = (
        BridgeDictionaryLoader(args.dictionary)
        if args.dictionary
        else BridgeDictionaryLoader.from_environment()
    )
    repository = (
        JsonPegRepository(args.pegs) if args.pegs else JsonPegRepository.from_environment()
    )
    return MnemonicPegsApp(loader=loader, peg_repository=repository)


def _run_search(app: MnemonicPegsApp, args: argparse.Namespace) -> List[str]:
    system = get_system(args.system)
    digits = clean_digits(args.digits)
    formatter = MatchResultFormatter(show_weights=args.weights)
    output = [formatter.format_results(digits, app.search(digits, system), system)]
    if args.splits and digits:
        output.append("")
        output.append(formatter.format_split_rows(app.split_rows(digits, system)))
    return output


def _run_peg(app: MnemonicPegsApp, args: argparse.Namespace) -> List[str]:
    system = get_system(args.system)
    if args.peg_command == "add":
        peg, warnings = app.add_peg(args.digits, [word.lower() for word in args.words], system)
        lines = [f"⚠️  {warning}" for warning in warnings]
        lines.append(f"📌 {peg.digits} → {' '.join(peg.words)}  ({peg.id})")
        return lines
    if args.peg_command == "list":
        pegs = app.peg_repository.pegs_for_system(system)
        if not pegs:
            return [f"No pegs saved for {system.name}."]
        return [f"{peg.id}  {peg.digits:<10} {' '.join(peg.words)}" for peg in pegs]
    removed = app.peg_repository.remove_peg(args.peg_id)
    return ["Peg removed." if removed else f"No peg with id {args.peg_id}."]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    app = _build_app(args)

    try:
        if args.command == "search":
            lines = _run_search(app, args)
        elif args.command == "encode":
            system = get_system(args.system)
            lines = [f"{word}: {app.encode(word, system) or '-'}" for word in args.words]
        else:
            lines = _run_peg(app, args)
    except DictionaryLoadError as exc:
        print(f"❌ {exc}. Check the dictionary path and try again.", file=sys.stderr)
        return EXIT_DICTIONARY_ERROR
    except PegStoreError as exc:
        print(f"❌ {exc}", file=sys.stderr)
        return EXIT_STORE_ERROR
    except ValueError as exc:
        parser.error(str(exc))

    print("\n".join(lines))
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
