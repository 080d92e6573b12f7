"""Click outcomes."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ExpandByTag:
    """Load more articles carrying this tag."""

    tag_name: str

    def to_dict(self) -> dict:
        return {"action": "expand", "tag": self.tag_name}


@dataclass(frozen=True)
class OpenExternal:
    """Open an article URL in a new browsing context."""

    url: str

    def to_dict(self) -> dict:
        return {"action": "open", "url": self.url}


@dataclass(frozen=True)
class NoAction:
    """Nothing happens (empty canvas, submitter glyph)."""

    def to_dict(self) -> dict:
        return {"action": "none"}


Action = ExpandByTag | OpenExternal | NoAction
