"""Conversion of raw query strings into compiled patterns."""

from __future__ import annotations

import logging
import re

from findhighlight.models import Pattern

LOGGER = logging.getLogger(__name__)

# Matching is always global, so "g" is accepted and ignored.
_REGEX_QUERY = re.compile(r"^/(.+)/([gims]*)$", re.DOTALL)
_FLAG_MAP = {"i": re.IGNORECASE, "m": re.MULTILINE, "s": re.DOTALL}


class InvalidPatternError(ValueError):
    """Raised when a ``/pattern/flags`` query has a malformed body."""

    def __init__(self, query: str, reason: str) -> None:
        super().__init__(f"Invalid pattern {query!r}: {reason}")
        self.query = query
        self.reason = reason


def is_blank(query: str | None) -> bool:
    return query is None or not query.strip()


def compile_literal(query: str) -> Pattern:
    """Compile ``query`` as plain, case-insensitive text."""
    return Pattern(
        source=query,
        case_sensitive=False,
        is_regex=False,
        regex=re.compile(re.escape(query), re.IGNORECASE),
    )


def compile_query(query: str | None) -> Pattern | None:
    """Turn a raw query into a :class:`Pattern`.

    Returns ``None`` for empty or whitespace-only queries, meaning there is
    nothing to highlight. A query shaped like ``/body/flags`` is compiled as a
    regular expression; anything else is matched literally and ignoring case.

    Raises:
        InvalidPatternError: if the regular expression body does not compile.
    """
    if is_blank(query):
        return None

    regex_query = _REGEX_QUERY.match(query)
    if regex_query is None:
        return compile_literal(query)

    body, flag_chars = regex_query.groups()
    flags = 0
    for char in flag_chars:
        flags |= _FLAG_MAP.get(char, 0)
    try:
        regex = re.compile(body, flags)
    except re.error as exc:
        raise InvalidPatternError(query, str(exc)) from exc

    return Pattern(
        source=body,
        case_sensitive=not flags & re.IGNORECASE,
        is_regex=True,
        regex=regex,
    )


def compile_query_or_literal(query: str | None) -> Pattern | None:
    """Like :func:`compile_query`, but fall back to literal text on a bad regex."""
    try:
        return compile_query(query)
    except InvalidPatternError as exc:
        LOGGER.debug("%s, matching as literal text", exc)
        return compile_literal(query)  # type: ignore[arg-type]
