from .match_service import MatchService, SegmentMatches, SplitRow, clean_digits
from .result_formatter import MatchResultFormatter

__all__ = ["MatchResultFormatter", "MatchService", "SegmentMatches", "SplitRow", "clean_digits"]
