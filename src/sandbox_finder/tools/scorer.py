"""
Relevance scoring for the Sandbox Finder.

Scores only order results; they never filter them.
"""

from typing import List, NamedTuple

from ..models.search_results import FileEntry


EXACT_MATCH_SCORE = 100.0
PREFIX_MATCH_SCORE = 80.0
SUBSTRING_MATCH_SCORE = 60.0

# Numerator of the short-name bonus (bonus = LENGTH_BONUS / len(name))
LENGTH_BONUS = 20.0


class ScoredEntry(NamedTuple):
    entry: FileEntry
    score: float


def score(lower_name: str, lower_query: str) -> float:
    """
    Score a lower-cased entry name against a lower-cased query.

    Only the highest applicable tier counts (exact, then prefix, then
    substring). A bonus inversely proportional to the name length is always
    added, so shorter names rank above longer ones in the same tier.

    Args:
        lower_name: Entry name, lower-cased
        lower_query: Sanitized query, lower-cased

    Returns:
        The relevance score
    """
    if lower_name == lower_query:
        base = EXACT_MATCH_SCORE
    elif lower_name.startswith(lower_query):
        base = PREFIX_MATCH_SCORE
    elif lower_query in lower_name:
        base = SUBSTRING_MATCH_SCORE
    else:
        base = 0.0

    bonus = LENGTH_BONUS / len(lower_name) if lower_name else 0.0
    return base + bonus


def rank_entries(entries: List[FileEntry], lower_query: str) -> List[FileEntry]:
    """
    Order entries by descending relevance.

    Equal scores are ordered by ascending path so output is reproducible.
    """
    scored = [ScoredEntry(entry, score(entry.name.lower(), lower_query)) for entry in entries]
    scored.sort(key=lambda item: (-item.score, item.entry.path))
    return [item.entry for item in scored]
