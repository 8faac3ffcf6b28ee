"""Plain-text rendering of match results for the command line."""

from __future__ import annotations

from typing import Iterable, List, Sequence

from mnemonic_pegs.core import MatchCandidate, MnemonicSystem, encode

from .match_service import SplitRow


class MatchResultFormatter:
    """Render ranked matches and split rows with their digit breakdown."""

    def __init__(self, *, show_weights: bool = False) -> None:
        self.show_weights = show_weights

    def _breakdown(self, candidate: MatchCandidate, system: MnemonicSystem) -> str:
        if candidate.is_peg_sourced:
            return candidate.digits
        return "+".join(encode(word, system) for word in candidate.words)

    def format_candidate(self, candidate: MatchCandidate, system: MnemonicSystem) -> str:
        marker = "📌" if candidate.is_peg_sourced else ("✅" if candidate.is_full_match else "➖")
        line = f"{marker} {candidate.phrase}  [{self._breakdown(candidate, system)}]"
        if not candidate.is_full_match:
            line += f"  (covers {len(candidate.digits)} digits)"
        if self.show_weights:
            line += f"  w={candidate.weight:.1f}"
        return line

    def format_results(
        self,
        digits: str,
        candidates: Sequence[MatchCandidate],
        system: MnemonicSystem,
    ) -> str:
        if not digits:
            return "❌ Enter some digits to search."
        if not candidates:
            return f"❌ No matches found for {digits} in {system.name}."

        full = [candidate for candidate in candidates if candidate.is_full_match]
        partial = [candidate for candidate in candidates if not candidate.is_full_match]

        lines: List[str] = [f"🔢 {digits} — {system.name}"]
        if full:
            lines.append("Full matches:")
            lines.extend(f"  {self.format_candidate(c, system)}" for c in full)
        if partial:
            lines.append("Partial matches:")
            lines.extend(f"  {self.format_candidate(c, system)}" for c in partial)
        return "\n".join(lines)

    def format_split_rows(self, rows: Iterable[SplitRow]) -> str:
        lines: List[str] = []
        for row in rows:
            cells = []
            for segment in row.segments:
                words = ", ".join(
                    f"{match.phrase}*" if match.is_peg_sourced else match.phrase
                    for match in segment.matches
                )
                more = " …" if segment.has_more else ""
                cells.append(f"{segment.digits}: {words}{more}")
            lines.append(f"{row.pattern:<16} " + " | ".join(cells))
        if not lines:
            return "No complete splits found."
        return "\n".join(lines)


__all__ = ["MatchResultFormatter"]
