# ABOUTME: Keyword extraction from a goal objective, used to query the knowledge store.
# ABOUTME: Lower-cased tokens minus stopwords, order-preserving, capped at MAX_KEYWORDS.

import re

from core.config import MAX_KEYWORDS

_TOKEN_RE = re.compile(r"[a-z][a-z0-9+#'-]*")

STOPWORDS = frozenset(
    """
    a about above after again against all am an and any are as at be because been
    before being below between both but by can could did do does doing down during
    each few for from further get getting got had has have having he her here hers
    him his how i if in into is it its itself just like me more most my myself no
    nor not now of off on once only or other our ours out over own really same she
    should so some such than that the their theirs them then there these they this
    those through to too under until up very want wanna was we were what when where
    which while who whom why will with would you your yours yourself
    able achieve become better by day days daily end goal goals good improve learn
    make month months next per start want week weeks year years
    """.split()
)

MIN_KEYWORD_LENGTH = 3


def tokenize(text: str) -> list[str]:
    """Lower-case word tokens with trailing apostrophes/hyphens trimmed."""
    return [t.strip("'-") for t in _TOKEN_RE.findall((text or "").lower())]


def extract_keywords(text: str, limit: int = MAX_KEYWORDS) -> list[str]:
    """Return up to `limit` distinct content words from text, in order of first appearance."""
    seen: set[str] = set()
    keywords: list[str] = []
    for token in tokenize(text):
        if len(token) < MIN_KEYWORD_LENGTH or token in STOPWORDS or token.isdigit():
            continue
        if token in seen:
            continue
        seen.add(token)
        keywords.append(token)
        if len(keywords) >= limit:
            break
    return keywords
