from __future__ import annotations

from typing import Iterable, Optional, Tuple


NEGATIVE_KEYWORDS_ENG: Tuple[str, ...] = (
    "bad",
    "dirty",
    "broken",
    "slow",
    "cold",
    "poor",
    "unhelpful",
    "noise",
    "smell",
    "issue",
)

NEGATIVE_KEYWORDS_AMH: Tuple[str, ...] = (
    "መጥፎ",
    "ቆሻሻ",
    "የተሰበረ",
    "ቀርፋፋ",
    "ቀዝቃዛ",
    "ደካማ",
    "የማይረዳ",
    "ጫጫታ",
    "ሽታ",
    "ችግር",
    "አይሰራም",
    "እርጥበት",
)

NEGATIVE_KEYWORDS: Tuple[str, ...] = NEGATIVE_KEYWORDS_ENG + NEGATIVE_KEYWORDS_AMH


def is_negative_comment(comment: Optional[str], keywords: Iterable[str] = NEGATIVE_KEYWORDS) -> bool:
    """Case-insensitive substring match against the negative keyword lists.

    Substring, not whole-word: "bad" also matches "badminton".
    """
    if not comment:
        return False
    lowered = comment.casefold()
    return any(kw.casefold() in lowered for kw in keywords)
