"""
Resource Data

Per-operation view over a resource's prior state and desired config.
Handlers read values with get(), detect changes with has_change(), and
record the new state with set() and set_id().
"""

import copy
from typing import Any, Dict, Optional, Tuple

from cpln_provider.schema import ResourceSchema, is_empty


class ResourceData:
    """
    State/config view handed to resource handlers.

    Lookup order for get(): values written by set(), then config (when
    planning against a config), then prior state.
    """

    def __init__(
        self,
        schema: ResourceSchema,
        state: Optional[Dict[str, Any]] = None,
        config: Optional[Dict[str, Any]] = None,
        resource_id: Optional[str] = None,
    ):
        self.schema = schema
        state = dict(state or {})
        self._id = resource_id if resource_id is not None else state.pop("id", "") or ""
        state.pop("id", None)
        self._state = schema.normalize(state)
        self._config = schema.normalize(config) if config is not None else None
        self._written: Dict[str, Any] = {}

    def id(self) -> str:
        return self._id

    def set_id(self, resource_id: str) -> None:
        self._id = resource_id or ""

    def get(self, key: str) -> Any:
        if key in self._written:
            return self._written[key]
        if self._config is not None and key in self._config:
            field = self.schema.fields.get(key)
            if field is None or not (field.computed and not field.optional):
                return self._config[key]
        return self._state.get(key)

    def get_ok(self, key: str) -> Tuple[Any, bool]:
        """Return (value, True) when the value is set and non-empty."""
        value = self.get(key)
        return value, not is_empty(value)

    def get_change(self, key: str) -> Tuple[Any, Any]:
        """Return (old, new) for a key."""
        new = self._config.get(key) if self._config is not None else self._state.get(key)
        return self._state.get(key), new

    def has_change(self, key: str) -> bool:
        if self._config is None or key not in self.schema:
            return False
        return key in self.changed_fields()

    def has_changes(self, *keys: str) -> bool:
        return any(self.has_change(key) for key in keys)

    def changed_fields(self) -> list:
        """All configurable fields that differ between state and config."""
        if self._config is None:
            return []
        return self.schema.changed_fields(self._state, self._config, data=self)

    def set(self, key: str, value: Any) -> None:
        if key not in self.schema:
            raise KeyError(f"Invalid address to set: {key!r}")
        self._written[key] = copy.deepcopy(value)

    def state(self) -> Optional[Dict[str, Any]]:
        """
        Build the resulting state.

        Returns:
            Normalized state including 'id', or None when the id is empty
        """
        if not self._id:
            return None

        values = {name: self.get(name) for name in self.schema.fields}
        result = self.schema.normalize(values)
        result["id"] = self._id
        return result
