"""Quote result type and prompt helpers."""

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

UNKNOWN_AUTHOR = "Unknown"

SYSTEM_PROMPT = (
    "You are a curator of short, memorable quotes. Reply with a single quote "
    "on the first line and its author on the second line, prefixed with '- '."
)

# "- Author", "— Author", "-- Author" on the last line
_AUTHOR_LINE = re.compile(r"^\s*(?:-{1,2}|—|–)\s*(?P<author>.+?)\s*$")


@dataclass
class Quote:
    """A quote returned by the model for a tag."""

    tag: str
    text: str
    author: str
    source: str
    model: str
    latency_ms: int
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tag": self.tag,
            "quote": self.text,
            "author": self.author,
            "source": self.source,
            "model": self.model,
            "latency_ms": self.latency_ms,
            "created_at": self.created_at.isoformat(),
        }


def build_messages(tag: str) -> List[Dict[str, str]]:
    """Chat messages asking for one quote about a tag."""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Give me a quote about {tag}."},
    ]


def extract_content(payload: Dict[str, Any]) -> str:
    """Return the first choice's message content, or an empty string."""
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    return (content or "").strip()


def split_author(content: str) -> Tuple[str, str]:
    """Split model output into (quote text, author)."""
    lines = [line for line in content.strip().splitlines() if line.strip()]
    if len(lines) >= 2:
        match = _AUTHOR_LINE.match(lines[-1])
        if match:
            text = " ".join(line.strip() for line in lines[:-1])
            return text.strip().strip('"“”'), match.group("author")

    return content.strip().strip('"“”'), UNKNOWN_AUTHOR
