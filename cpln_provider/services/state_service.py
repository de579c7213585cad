"""
State Management Service

File-backed resource state (YAML), keyed by resource address.
"""

import os
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from cpln_provider.constants import STATE_FORMAT_VERSION
from cpln_provider.exceptions import StateError

STATE_FILE_PERMISSIONS = 0o600


class StateService:
    """
    Centralized state service.

    Responsibilities:
    - Load and cache the state file
    - Query, store and remove per-address state
    - Persist with restrictive permissions (state holds secret values)
    """

    def __init__(self, state_path: Path):
        """
        Initialize state service.

        Args:
            state_path: Path to the YAML state file
        """
        self.state_path = Path(state_path)
        self._state_cache: Optional[Dict[str, Dict[str, Any]]] = None

    def load_state(self, force_reload: bool = False) -> Dict[str, Dict[str, Any]]:
        """
        Load resource state with caching.

        Args:
            force_reload: Force reload from disk, ignore cache

        Returns:
            Mapping of address -> {'type': ..., 'attributes': ...}

        Raises:
            StateError: If the state file is unreadable or has an unknown version
        """
        if self._state_cache is not None and not force_reload:
            return self._state_cache

        if not self.state_path.exists():
            self._state_cache = {}
            return self._state_cache

        try:
            with open(self.state_path, "r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise StateError(f"Failed to read state file {self.state_path}", context=str(e))

        version = raw.get("version", STATE_FORMAT_VERSION)
        if version != STATE_FORMAT_VERSION:
            raise StateError(
                f"Unsupported state format version: {version}",
                context=f"Expected version {STATE_FORMAT_VERSION}",
            )

        self._state_cache = raw.get("resources") or {}
        return self._state_cache

    def save_state(self) -> None:
        """Write the cached state to disk."""
        resources = self.load_state()
        document = {"version": STATE_FORMAT_VERSION, "resources": resources}

        self.state_path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.state_path.with_suffix(self.state_path.suffix + ".tmp")

        try:
            with open(tmp_path, "w") as f:
                yaml.safe_dump(document, f, default_flow_style=False, sort_keys=False)
            os.chmod(tmp_path, STATE_FILE_PERMISSIONS)
            os.replace(tmp_path, self.state_path)
        except OSError as e:
            raise StateError(f"Failed to write state file {self.state_path}", context=str(e))

    def addresses(self) -> List[str]:
        return list(self.load_state().keys())

    def get_attributes(self, address: str) -> Optional[Dict[str, Any]]:
        entry = self.load_state().get(address)
        if entry is None:
            return None
        return dict(entry.get("attributes") or {})

    def get_type(self, address: str) -> Optional[str]:
        entry = self.load_state().get(address)
        return entry.get("type") if entry else None

    def set_resource(
        self, address: str, resource_type: str, attributes: Dict[str, Any]
    ) -> None:
        self.load_state()[address] = {"type": resource_type, "attributes": attributes}

    def remove_resource(self, address: str) -> None:
        self.load_state().pop(address, None)

    def has_resource(self, address: str) -> bool:
        return address in self.load_state()

    def invalidate_cache(self) -> None:
        """Invalidate the state cache to force reload on next access."""
        self._state_cache = None
