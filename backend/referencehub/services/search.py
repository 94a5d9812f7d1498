"""
ReferenceHub Backend — Search Filter
====================================

What:  Case-insensitive substring search over entries.
How:   entry_matches() is the single definition of a match. It lowercases
       both sides with str.lower(), the same folding PostgreSQL's ILIKE uses,
       and compares each tag on its own.

       search_clause() is a narrowing SQL prefilter only. The SQL store
       still runs every candidate row through entry_matches(), so database
       and in-process results agree even where the database would fold case
       differently or would see the JSON punctuation of the tags column.

Searched fields: url, note, context, hostname, slide_url, tags.
Absent search text matches everything.
"""

from typing import Optional

from sqlalchemy import ColumnElement, or_

from referencehub.config import settings
from referencehub.models.entry import Entry
from referencehub.schemas.entry import EntryResponse

LIKE_ESCAPE = "\\"

# Characters of the JSON-encoded tags column that never occur inside a tag match
JSON_SYNTAX = frozenset('"[],\\')


def sanitize_query(raw: Optional[str], max_length: Optional[int] = None) -> Optional[str]:
    """
    Trim and cap free-text search input.

    Returns None for missing or blank input.
    """
    if not isinstance(raw, str):
        return None
    limit = max_length or settings.max_query_length
    trimmed = raw.strip()[:limit]
    return trimmed or None


def entry_matches(entry: EntryResponse, term: Optional[str]) -> bool:
    """True when `term` is a case-insensitive substring of a searched field."""
    if not term:
        return True
    needle = term.lower()
    haystacks = (
        entry.url,
        entry.note or "",
        entry.context or "",
        entry.hostname,
        entry.slide_url or "",
    )
    if any(needle in value.lower() for value in haystacks):
        return True
    return any(needle in tag.lower() for tag in entry.tags)


def like_pattern(term: str) -> str:
    """`%term%` with LIKE metacharacters escaped."""
    escaped = (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )
    return f"%{escaped}%"


def can_prefilter(term: str) -> bool:
    """
    True when the database can narrow rows for `term` without losing matches.

    SQLite lowercases ASCII only, and escape sequences in the tags JSON hide
    control characters, so only printable ASCII free of JSON syntax qualifies.
    """
    return term.isascii() and term.isprintable() and not JSON_SYNTAX.intersection(term)


def search_clause(term: Optional[str]) -> Optional[ColumnElement[bool]]:
    """
    Narrowing WHERE clause for `term`, or None when every row is a candidate.

    Tags are matched against their stored JSON text, so the clause can
    accept rows that entry_matches() later rejects.
    """
    if not term or not can_prefilter(term):
        return None
    pattern = like_pattern(term)
    columns = (
        Entry.url,
        Entry.note,
        Entry.context,
        Entry.hostname,
        Entry.slide_url,
        Entry.tags,
    )
    return or_(*(column.ilike(pattern, escape=LIKE_ESCAPE) for column in columns))
