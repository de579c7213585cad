"""
Base API Models

Fields shared by every control-plane object.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class Link:
    """Relation link attached to an API object."""

    rel: str
    href: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Link":
        return cls(rel=data.get("rel", ""), href=data.get("href", ""))

    def to_dict(self) -> Dict[str, str]:
        return {"rel": self.rel, "href": self.href}


@dataclass
class Base:
    """Common envelope of control-plane objects."""

    name: Optional[str] = None
    id: Optional[str] = None
    kind: Optional[str] = None
    version: Optional[int] = None
    description: Optional[str] = None
    tags: Optional[Dict[str, Any]] = None
    created: Optional[str] = None
    last_modified: Optional[str] = None
    links: List[Link] = field(default_factory=list)

    def self_link(self) -> Optional[str]:
        """Return the href of the 'self' link, if present."""
        for link in self.links:
            if link.rel == "self":
                return link.href
        return None

    def base_to_dict(self) -> Dict[str, Any]:
        """Serialize base fields, skipping unset ones."""
        result: Dict[str, Any] = {}
        if self.id is not None:
            result["id"] = self.id
        if self.name is not None:
            result["name"] = self.name
        if self.kind is not None:
            result["kind"] = self.kind
        if self.version is not None:
            result["version"] = self.version
        if self.description is not None:
            result["description"] = self.description
        if self.tags is not None:
            result["tags"] = self.tags
        return result

    @staticmethod
    def base_kwargs(data: Dict[str, Any]) -> Dict[str, Any]:
        """Extract base constructor kwargs from an API response."""
        return {
            "id": data.get("id"),
            "name": data.get("name"),
            "kind": data.get("kind"),
            "version": data.get("version"),
            "description": data.get("description"),
            "tags": data.get("tags"),
            "created": data.get("created"),
            "last_modified": data.get("lastModified"),
            "links": [Link.from_dict(link) for link in data.get("links") or []],
        }
