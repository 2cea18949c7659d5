# ABOUTME: Retrieval-augmented generation store: ranks KnowledgeSnippet rows by keyword overlap.
# ABOUTME: `python -m drift.knowledge` seeds the store from drift.knowledge_seed (idempotent by topic).

import argparse
import json
import logging

from sqlmodel import Session, select

from core.config import RAG_TOP_K
from core.database import KnowledgeSnippet, get_session
from drift.keywords import tokenize
from drift.knowledge_seed import SEED_SNIPPETS

logger = logging.getLogger(__name__)

# A match on a curated keyword counts more than an incidental match in the text.
KEYWORD_WEIGHT = 2
CONTENT_WEIGHT = 1


def _singular(word: str) -> str:
    if len(word) > 3 and word.endswith("s") and not word.endswith("ss"):
        return word[:-1]
    return word


def score_snippet(keywords: list[str], snippet: KnowledgeSnippet) -> int:
    """Weighted count of query keywords found in the snippet's keywords or text."""
    curated = {_singular(k) for k in json.loads(snippet.keywords or "[]")}
    text = {_singular(t) for t in tokenize(f"{snippet.topic} {snippet.content}")}
    score = 0
    for kw in {_singular(k) for k in keywords}:
        if kw in curated:
            score += KEYWORD_WEIGHT
        elif kw in text:
            score += CONTENT_WEIGHT
    return score


def search_snippets(
    session: Session, keywords: list[str], limit: int = RAG_TOP_K
) -> list[KnowledgeSnippet]:
    """Return up to `limit` snippets with a positive score, best first (ties by topic)."""
    if not keywords or limit <= 0:
        return []
    scored = []
    for snippet in session.exec(select(KnowledgeSnippet)):
        score = score_snippet(keywords, snippet)
        if score > 0:
            scored.append((score, snippet))
    scored.sort(key=lambda pair: (-pair[0], pair[1].topic))
    return [snippet for _, snippet in scored[:limit]]


def populate_knowledge(session: Session, snippets: list[dict] = SEED_SNIPPETS) -> tuple[int, int]:
    """Insert missing topics and refresh existing ones. Returns (added, updated)."""
    added = updated = 0
    for entry in snippets:
        keywords = json.dumps([k.lower() for k in entry.get("keywords", [])])
        existing = session.exec(
            select(KnowledgeSnippet).where(KnowledgeSnippet.topic == entry["topic"])
        ).first()
        if existing is None:
            session.add(
                KnowledgeSnippet(
                    topic=entry["topic"], content=entry["content"], keywords=keywords
                )
            )
            added += 1
        elif existing.content != entry["content"] or existing.keywords != keywords:
            existing.content = entry["content"]
            existing.keywords = keywords
            session.add(existing)
            updated += 1
    session.commit()
    return added, updated


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Populate the Drift knowledge base.")
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Delete all stored snippets before loading the bundled ones.",
    )
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    with get_session() as session:
        if args.reset:
            for snippet in session.exec(select(KnowledgeSnippet)):
                session.delete(snippet)
            session.commit()
            logger.info("Cleared knowledge base")
        added, updated = populate_knowledge(session)
    logger.info("Knowledge base ready: %d added, %d updated", added, updated)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
