"""FastAPI application exposing the highlighter over HTTP."""

from __future__ import annotations

import logging
from typing import Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from findhighlight.config import HighlightConfig
from findhighlight.highlight.locator import iter_match_records, locate_matches
from findhighlight.highlight.pattern import InvalidPatternError, compile_query
from findhighlight.highlight.session import HighlightSession
from findhighlight.models import MatchRecord, Pattern
from findhighlight.rendering.document import RenderedDocument, StaticQueryInput
from findhighlight.utils.text import join_lines, split_lines
from findhighlight.web.frontend import router as frontend_router

LOGGER = logging.getLogger(__name__)

app = FastAPI(title="findhighlight Web", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(frontend_router)


class HighlightPayload(BaseModel):
    text: str
    query: str
    lexer: str | None = None
    first: int = 0
    last: int | None = None
    tab_width: int = 4
    legacy_tabs: bool = False


class MatchesPayload(BaseModel):
    text: str
    query: str


def _compile(query: str) -> Pattern:
    try:
        pattern = compile_query(query)
    except InvalidPatternError as exc:
        raise HTTPException(status_code=422, detail=str(exc))
    if pattern is None:
        raise HTTPException(status_code=400, detail="Empty query")
    return pattern


@app.on_event("startup")
async def startup_event() -> None:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(message)s")


@app.post("/highlight")
async def highlight_text(payload: HighlightPayload) -> dict[str, Any]:
    _compile(payload.query)

    if payload.last is not None and payload.last < payload.first:
        raise HTTPException(status_code=400, detail="'last' must not be before 'first'")
    height = None if payload.last is None else payload.last - payload.first + 1

    try:
        config = HighlightConfig(tab_width=payload.tab_width, legacy_tabs=payload.legacy_tabs)
        document = RenderedDocument(
            payload.text,
            lexer=payload.lexer,
            tab_width=config.tab_width,
            viewport_height=height,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    document.scroll_to(payload.first)

    session = HighlightSession(document, StaticQueryInput(payload.query), config)
    session.start()
    try:
        count = session.apply_highlights(payload.query)
        lines = [
            {"line": line, "markup": document.get_rendered_line_markup(line)}
            for line in document.get_visible_line_range().lines()
        ]
    finally:
        session.close()

    return {"lines": lines, "matches": count}


@app.post("/matches")
async def list_matches(payload: MatchesPayload) -> dict[str, List[MatchRecord]]:
    pattern = _compile(payload.query)
    lines = split_lines(payload.text)
    records = list(iter_match_records(locate_matches(join_lines(lines), pattern)))
    LOGGER.info("Query %r matched %d times", payload.query, len(records))
    return {"matches": records}
