"""
Resource Helpers

Shared helpers for mapping API objects into resource state.
"""

from typing import Any, Dict, List, Optional

from cpln_provider.constants import (
    SYSTEM_TAG_PREFIX,
    ERROR_RESOURCE_EXISTS,
    ERROR_RESOURCE_EXISTS_DETAIL,
)
from cpln_provider.models.base import Base, Link
from cpln_provider.models.results import Diagnostics
from cpln_provider.resource_data import ResourceData


def get_name_from_self_link(link: str) -> str:
    """Return the last path segment, e.g. '/org/o/domain/example.com' -> 'example.com'."""
    if not link:
        return ""
    return link.rstrip("/").split("/")[-1]


def description_helper(name: str, description: Optional[str]) -> str:
    """Empty descriptions default to the resource name."""
    if not description:
        return name
    return description


def get_tags(tags: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Drop platform-managed tags."""
    if not tags:
        return {}
    return {k: v for k, v in tags.items() if not k.startswith(SYSTEM_TAG_PREFIX)}


def get_tag_changes(d: ResourceData) -> Dict[str, Any]:
    """
    Build the tags patch for an update.

    Removed keys are sent as None so the API deletes them.
    """
    old, new = d.get_change("tags")
    old = old or {}
    new = new or {}

    changes: Dict[str, Any] = {key: None for key in old if key not in new}
    changes.update(new)
    return changes


def set_base(d: ResourceData, base: Base) -> None:
    d.set("cpln_id", base.id)
    d.set("name", base.name)
    d.set("description", base.description)
    d.set("tags", get_tags(base.tags))


def set_self_link(links: List[Link], d: ResourceData) -> None:
    for link in links:
        if link.rel == "self":
            d.set("self_link", link.href)
            return
    d.set("self_link", None)


def resource_exists_helper() -> Diagnostics:
    return Diagnostics.error(ERROR_RESOURCE_EXISTS, ERROR_RESOURCE_EXISTS_DETAIL)
