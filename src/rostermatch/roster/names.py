"""
Player name normalization, scoring and best-match lookup.

The two rosters we reconcile are typed in by different people on
different sites, so the same player can show up as:
- "John Smith" vs "john smith" (case)
- "  John   Smith " vs "John Smith" (stray whitespace)
- "Jon Smyth" vs "John Smith" (misspelling)

Normalization only handles case and whitespace. Everything else is left
to the edit-distance similarity score, and to the thresholds the
reconciler applies on top of it.
"""

from dataclasses import dataclass
from typing import Optional, Sequence

from rapidfuzz.distance import Levenshtein


def normalize_name(name: str) -> str:
    """
    Normalize a display name for comparison.

    Normalization steps:
    1. Convert to lowercase
    2. Strip leading/trailing whitespace
    3. Collapse any run of whitespace to a single space

    Args:
        name: Raw display name from either roster

    Returns:
        Normalized name; empty input gives empty output

    Examples:
        >>> normalize_name("  John   Smith ")
        'john smith'
        >>> normalize_name("Carlos RUIZ")
        'carlos ruiz'
    """
    if not name:
        return ""

    # str.split() with no argument splits on any whitespace run and
    # drops leading/trailing whitespace in one go
    return " ".join(name.lower().split())


def edit_distance(a: str, b: str) -> int:
    """
    Number of single-character edits needed to turn a into b.

    Insertions, deletions and substitutions each cost 1 (classic
    Levenshtein distance). RapidFuzz runs the same dynamic programme
    as the textbook (len(a)+1) x (len(b)+1) table, just in C.

    Examples:
        >>> edit_distance("kitten", "sitting")
        3
        >>> edit_distance("", "abc")
        3
    """
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """
    Similarity score between two (normalized) names.

    Defined as (L - edit_distance) / L where L is the length of the
    longer string, so identical strings score 1.0 and strings with
    nothing in common score 0.0. The score is symmetric.

    Args:
        a: First name (should be normalized)
        b: Second name (should be normalized)

    Returns:
        Score from 0.0 to 1.0; 1.0 when both strings are empty

    Examples:
        >>> similarity("john smith", "jon smyth")
        0.8
        >>> similarity("", "")
        1.0
    """
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(a, b)) / longest


@dataclass(frozen=True)
class MatchResult:
    """
    Best candidate found by find_best_match().

    candidate_index points back into the candidate list that was
    searched, so callers can recover the original record.
    """
    candidate_name: str
    candidate_index: int
    score: float

    @property
    def percent(self) -> int:
        """Score as a whole percentage, for display."""
        return round(self.score * 100)

    def __repr__(self) -> str:
        return (
            f"<MatchResult(name='{self.candidate_name}', "
            f"index={self.candidate_index}, score={self.score:.2f})>"
        )


def find_best_match(
    name: str,
    candidates: Sequence[str],
    threshold: float,
) -> Optional[MatchResult]:
    """
    Find the most similar candidate at or above a threshold.

    Every candidate is scored. A candidate replaces the running best
    only if it scores strictly higher, so on ties the earliest candidate
    wins. The running best starts at 0.0, which means a zero score is
    never a match even with a zero threshold.

    Args:
        name: Name to look up (should be normalized)
        candidates: Candidate names, in priority order (should be normalized)
        threshold: Minimum similarity score to accept

    Returns:
        MatchResult for the best candidate, or None if nothing qualifies

    Examples:
        >>> find_best_match("an", ["ann", "anne"], 0.5).candidate_index
        0
        >>> find_best_match("xyz", ["ann"], 0.5) is None
        True
    """
    best: Optional[MatchResult] = None
    best_score = 0.0

    for index, candidate in enumerate(candidates):
        score = similarity(name, candidate)
        if score > best_score and score >= threshold:
            best_score = score
            best = MatchResult(
                candidate_name=candidate,
                candidate_index=index,
                score=score,
            )

    return best
