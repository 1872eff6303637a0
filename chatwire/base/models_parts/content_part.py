"""
Structured content part model.

A message's content is either plain text or a tuple of `ContentPart` items
(text, images, JSON blobs). Parts are immutable so that a `Message` holding
them stays immutable too.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Literal, Mapping, Optional


# Known content part types.
ContentPartType = Literal[
    "text",    # Plain text content
    "image",   # Image content; ``data`` carries url or base64 + media_type
    "json",    # JSON content as string or mapping
    "other",   # Catch-all (adapter may attach provider-specific type info)
]


@dataclass(frozen=True)
class ContentPart:
    """A single piece of structured message content.

    Attributes:
        type: The semantic kind of the content part, e.g. ``"text"`` or
            ``"image"``.
        text: Optional textual content for human-readable parts.
        data: Optional adapter-specific payload for non-text parts (for
            images: ``{"url": ...}`` or ``{"base64": ..., "media_type": ...}``).
    """

    type: ContentPartType
    text: Optional[str] = None
    data: Optional[Mapping[str, Any]] = None

    @classmethod
    def text_part(cls, text: str) -> "ContentPart":
        return cls(type="text", text=text)

    @classmethod
    def image_url(cls, url: str) -> "ContentPart":
        return cls(type="image", data={"url": url})

    @classmethod
    def image_base64(cls, data: str, media_type: str = "image/png") -> "ContentPart":
        return cls(type="image", data={"base64": data, "media_type": media_type})

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable dictionary representation of the part."""
        out = asdict(self)
        if self.data is not None:
            out["data"] = dict(self.data)
        return out


__all__ = ["ContentPart", "ContentPartType"]
