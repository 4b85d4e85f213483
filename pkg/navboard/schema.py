"""
Navigation card schema.

A card is a single dashboard entry: title, URL, optional description,
tags, group and accent color. Cards are persisted as plain dicts inside one
JSON document; NavCard is the typed view used when the server builds new ones.
"""
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Any
import random
import uuid


# Accent colors handed out when a new card arrives without one
PALETTE = ["#EF4444", "#F59E0B", "#10B981", "#3B82F6", "#8B5CF6", "#EC4899", "#0EA5E9"]

DEFAULT_TITLE = "Untitled"
DEFAULT_URL = "#"

SEED_CARDS: List[Dict[str, Any]] = [
    {"id": "a1", "title": "Cloudflare", "url": "https://cloudflare.com",
     "tags": ["edge"], "desc": "Cloudflare", "color": "#2563EB"},
    {"id": "a2", "title": "Google", "url": "https://www.google.com",
     "tags": ["search"], "desc": "Google Search", "color": "#EA4335"},
]


def new_card_id() -> str:
    """Generate a fresh card identifier (uuid4 hex)."""
    return uuid.uuid4().hex


def random_color() -> str:
    return random.choice(PALETTE)


@dataclass
class NavCard:
    """One navigation entry."""

    id: str
    title: str = DEFAULT_TITLE
    url: str = DEFAULT_URL
    desc: str = ""
    tags: List[str] = field(default_factory=list)
    group: Optional[str] = None    # Only set on grouped dashboards
    color: str = field(default_factory=random_color)
    extra: Dict[str, Any] = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(cls, data: Dict[str, Any], card_id: Optional[str] = None) -> "NavCard":
        """
        Build a new card from a client payload.

        Missing or empty title/url fall back to defaults instead of being
        rejected. Any client-supplied id is replaced by a server-generated one.
        """
        known = {"id", "title", "url", "desc", "tags", "group", "color"}
        tags = data.get("tags") or []
        if isinstance(tags, str):
            tags = [t.strip() for t in tags.split(",") if t.strip()]
        elif not isinstance(tags, list):
            tags = []
        return cls(
            id=card_id or new_card_id(),
            title=data.get("title") or DEFAULT_TITLE,
            url=data.get("url") or DEFAULT_URL,
            desc=data.get("desc") or "",
            tags=list(tags),
            group=data.get("group") or None,
            color=data.get("color") or random_color(),
            extra={k: v for k, v in data.items() if k not in known},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the stored document shape."""
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "tags": self.tags,
            "desc": self.desc,
            "color": self.color,
        })
        if self.group is not None:
            data["group"] = self.group
        return data
