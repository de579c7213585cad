"""
Secret Models

Wire model for the polymorphic secret object.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .base import Base


@dataclass
class Secret(Base):
    """
    Control-plane secret.

    `data` is sent on create; `data_replace` is sent on update and replaces
    the whole remote data document.
    """

    type: Optional[str] = None
    data: Any = None
    data_replace: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Secret":
        return cls(
            type=data.get("type"),
            data=data.get("data"),
            **Base.base_kwargs(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        result = self.base_to_dict()
        if self.type is not None:
            result["type"] = self.type
        if self.data is not None:
            result["data"] = self.data
        if self.data_replace is not None:
            result["$replace/data"] = self.data_replace
        return result

    def __repr__(self) -> str:
        return f"Secret(name={self.name}, type={self.type})"
