"""Application configuration defaults."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

DEFAULT_START_MARKER = "<mark class='find-highlight' style='background-color: #FFFF00'>"
DEFAULT_END_MARKER = "</mark>"
DEFAULT_TAB_WIDTH = 4

_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(slots=True)
class HighlightConfig:
    start_marker: str = DEFAULT_START_MARKER
    end_marker: str = DEFAULT_END_MARKER
    tab_width: int = DEFAULT_TAB_WIDTH
    legacy_tabs: bool = False
    literal_fallback: bool = False

    def __post_init__(self) -> None:
        if not self.start_marker or not self.end_marker:
            raise ValueError("Highlight markers must be non-empty strings")
        if self.tab_width < 1:
            raise ValueError(f"tab_width must be >= 1, got {self.tab_width}")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "HighlightConfig":
        """Build a config, letting ``FINDHIGHLIGHT_*`` variables override defaults."""
        env = os.environ if environ is None else environ
        return cls(
            start_marker=env.get("FINDHIGHLIGHT_START_MARKER", DEFAULT_START_MARKER),
            end_marker=env.get("FINDHIGHLIGHT_END_MARKER", DEFAULT_END_MARKER),
            tab_width=int(env.get("FINDHIGHLIGHT_TAB_WIDTH", DEFAULT_TAB_WIDTH)),
            legacy_tabs=env.get("FINDHIGHLIGHT_LEGACY_TABS", "").strip().lower() in _TRUTHY,
        )
