"""JSON-file persistence for user pegs."""

from __future__ import annotations

import json
import os
import secrets
import time
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any, Dict, List, Optional, Sequence

from mnemonic_pegs.core import Peg, get_system
from mnemonic_pegs.core.systems import SystemLike

from ...utils.observability import get_logger

PEG_STORE_ENV = "MNEMONIC_PEGS_PEG_STORE"
DEFAULT_PEG_STORE = Path("~/.mnemonic_pegs/pegs.json")


class PegStoreError(RuntimeError):
    """Raised when the peg store cannot be safely read for an update or written."""


def _ensure_parent_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _atomic_write_text(path: Path, payload: str) -> None:
    _ensure_parent_directory(path)
    tmp = NamedTemporaryFile(
        "w", delete=False, dir=str(path.parent), prefix=f".{path.name}.", encoding="utf-8"
    )
    try:
        with tmp:
            tmp.write(payload)
            tmp.flush()
            os.fsync(tmp.fileno())
        os.replace(tmp.name, path)
    except OSError:
        Path(tmp.name).unlink(missing_ok=True)
        raise


def _new_peg_id(created_at: int) -> str:
    return f"{created_at}-{secrets.token_hex(4)[:7]}"


class JsonPegRepository:
    """Stores an ordered list of ``{id, digits, words, system, createdAt}`` records.

    Newest pegs come first. Reads of an unreadable or malformed file are
    logged and treated as empty so a corrupt store never blocks a search.
    Writes refuse to replace such a file, and records that cannot be parsed
    as pegs are written back untouched.
    """

    def __init__(self, path: Path | str) -> None:
        self.path = Path(path).expanduser()
        self._logger = get_logger(__name__).bind(
            component="peg_repository",
            path=str(self.path),
        )

    @classmethod
    def from_environment(cls) -> "JsonPegRepository":
        return cls(os.environ.get(PEG_STORE_ENV) or DEFAULT_PEG_STORE)

    def _load_payload(self) -> List[Any]:
        if not self.path.exists():
            return []
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise PegStoreError(f"Peg store {self.path} is unreadable: {exc}") from exc
        if not isinstance(payload, list):
            raise PegStoreError(
                f"Peg store {self.path} holds a {type(payload).__name__}, not a list"
            )
        return payload

    def _read_records(self) -> List[Dict[str, Any]]:
        try:
            payload = self._load_payload()
        except PegStoreError as exc:
            self._logger.error("Failed to load pegs", context={"error": str(exc)})
            return []
        return [record for record in payload if isinstance(record, dict)]

    def _write(self, records: Sequence[Any]) -> None:
        payload = json.dumps(list(records), indent=2)
        try:
            _atomic_write_text(self.path, payload)
        except OSError as exc:
            self._logger.error("Failed to save pegs", context={"error": str(exc)})
            raise PegStoreError(f"Failed to save pegs to {self.path}: {exc}") from exc

    def _parse(self, records: Sequence[Any]) -> List[Peg]:
        pegs: List[Peg] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            try:
                pegs.append(Peg.from_record(record))
            except (KeyError, ValueError) as exc:
                self._logger.warning(
                    "Skipping malformed peg record",
                    context={"record": record, "error": str(exc)},
                )
        return pegs

    def load_pegs(self) -> List[Peg]:
        return self._parse(self._read_records())

    def pegs_for_system(self, system: SystemLike) -> List[Peg]:
        resolved = get_system(system)
        return [peg for peg in self.load_pegs() if peg.applies_to(resolved)]

    def find_peg(self, digits: str, words: Sequence[str], system: SystemLike) -> Optional[Peg]:
        return self._find(self.load_pegs(), digits, tuple(words), get_system(system).id)

    @staticmethod
    def _find(pegs: Sequence[Peg], digits: str, words: Sequence[str], system_id) -> Optional[Peg]:
        for peg in pegs:
            if peg.digits == digits and peg.words == tuple(words) and peg.system is system_id:
                return peg
        return None

    def is_peg(self, digits: str, words: Sequence[str], system: SystemLike) -> bool:
        return self.find_peg(digits, words, system) is not None

    def add_peg(self, digits: str, words: Sequence[str] | str, system: SystemLike) -> Peg:
        """Store a peg, returning the existing one for an exact duplicate.

        Raises :class:`PegStoreError` when the current file cannot be read,
        leaving it in place.
        """

        records = self._load_payload()
        created_at = int(time.time() * 1000)
        peg = Peg.create(digits, words, system, created_at=created_at)
        existing = self._find(self._parse(records), peg.digits, peg.words, peg.system)
        if existing is not None:
            return existing

        peg = Peg.create(
            peg.digits, peg.words, peg.system, id=_new_peg_id(created_at), created_at=created_at
        )
        self._write([peg.to_record(), *records])
        self._logger.info(
            "Peg added",
            context={"id": peg.id, "digits": peg.digits, "system": peg.system.value},
        )
        return peg

    def remove_peg(self, peg_id: str) -> bool:
        records = self._load_payload()
        remaining = [
            record
            for record in records
            if not (isinstance(record, dict) and record.get("id") == peg_id)
        ]
        if len(remaining) == len(records):
            return False
        self._write(remaining)
        self._logger.info("Peg removed", context={"id": peg_id})
        return True

    def clear(self) -> None:
        self._write([])


__all__ = ["DEFAULT_PEG_STORE", "JsonPegRepository", "PEG_STORE_ENV", "PegStoreError"]
