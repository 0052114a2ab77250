"""Helpers for the highlight markup used inside generated prompts.

Video prompts wrap the spoken line in ``<HIGHLIGHT>...</HIGHLIGHT>`` so the
narration can be picked out; the markup is stripped before anything leaves
the app.
"""

import re
from typing import Optional

HIGHLIGHT_OPEN = "<HIGHLIGHT>"
HIGHLIGHT_CLOSE = "</HIGHLIGHT>"

_SPAN_RE = re.compile(r"<HIGHLIGHT>(.*?)</HIGHLIGHT>", re.DOTALL)
_WS_RE = re.compile(r"\s+")


def strip_highlight(text: str) -> str:
    """Remove every highlight tag, keeping the enclosed text."""
    return text.replace(HIGHLIGHT_OPEN, "").replace(HIGHLIGHT_CLOSE, "")


def highlight_span(text: str) -> Optional[str]:
    """Return the first highlighted span, or None when there is none."""
    match = _SPAN_RE.search(text)
    return match.group(1) if match else None


def normalize_ws(text: str) -> str:
    return _WS_RE.sub("", text)


def span_matches(text: str, segment: str) -> bool:
    """Check that the highlighted span reproduces ``segment``, ignoring whitespace."""
    span = highlight_span(text)
    if span is None:
        return False
    return normalize_ws(span) == normalize_ws(segment)
