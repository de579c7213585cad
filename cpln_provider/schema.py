"""
Resource Schema

Declarative description of the fields a resource accepts, with
normalization (defaults, single-block wrapping), validation and diffing.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from cpln_provider.models.results import Diagnostics


class FieldType(Enum):
    """Value type of a schema field."""

    STRING = "string"
    INT = "int"
    BOOL = "bool"
    MAP = "map"
    LIST = "list"
    SET = "set"


Validator = Callable[[Any, str], List[str]]
DiffSuppressor = Callable[[str, Any, Any, Any], bool]


@dataclass
class Field:
    """A single schema field."""

    type: FieldType
    required: bool = False
    optional: bool = False
    computed: bool = False
    force_new: bool = False
    default: Any = None
    sensitive: bool = False
    max_items: Optional[int] = None
    min_items: Optional[int] = None
    # Nested block schema for LIST fields, or the scalar element type for MAP/SET
    elem: Union["ResourceSchema", FieldType, None] = None
    validate: Optional[Validator] = None
    diff_suppress: Optional[DiffSuppressor] = None
    exactly_one_of: Optional[List[str]] = None

    @property
    def is_block(self) -> bool:
        return self.type == FieldType.LIST and isinstance(self.elem, ResourceSchema)


def is_empty(value: Any) -> bool:
    """Zero values count as unset."""
    return value is None or value == "" or value == [] or value == {}


def values_equal(field: Field, old: Any, new: Any) -> bool:
    if is_empty(old) and is_empty(new):
        return True
    if field.type == FieldType.SET and isinstance(old, list) and isinstance(new, list):
        return sorted(map(str, old)) == sorted(map(str, new))
    if field.is_block and isinstance(old, list) and isinstance(new, list):
        if len(old) != len(new):
            return False
        return all(
            not field.elem.changed_fields(o or {}, n or {}) for o, n in zip(old, new)
        )
    return old == new


class ResourceSchema:
    """Ordered mapping of field name to Field."""

    def __init__(self, fields: Dict[str, Field]):
        self.fields = fields

    def __contains__(self, key: str) -> bool:
        return key in self.fields

    def __getitem__(self, key: str) -> Field:
        return self.fields[key]

    def items(self):
        return self.fields.items()

    def force_new_fields(self) -> List[str]:
        return [name for name, f in self.fields.items() if f.force_new]

    def normalize(self, values: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Return a copy of values with defaults applied.

        Blocks given as a single mapping are wrapped into a one-item list,
        map values are coerced to strings, and unknown keys are kept so
        that validation can report them.
        """
        values = dict(values or {})
        result: Dict[str, Any] = {}

        for name, field in self.fields.items():
            value = values.pop(name, None)

            if value is None:
                if field.default is not None:
                    value = field.default
                else:
                    result[name] = None
                    continue

            if field.is_block:
                if isinstance(value, dict):
                    value = [value]
                if isinstance(value, list):
                    value = [
                        field.elem.normalize(item) if isinstance(item, dict) else item
                        for item in value
                    ]
            elif field.type == FieldType.MAP and isinstance(value, dict):
                value = {
                    str(k): (str(v) if v is not None and field.elem == FieldType.STRING else v)
                    for k, v in value.items()
                }
            elif field.type == FieldType.SET and isinstance(value, (set, tuple)):
                value = list(value)

            result[name] = value

        # Keep unknown keys for validation to flag
        result.update(values)
        return result

    def validate(self, config: Dict[str, Any], path: str = "") -> Diagnostics:
        """
        Validate a normalized config against this schema.

        Args:
            config: Normalized configuration values
            path: Attribute path prefix for nested blocks

        Returns:
            Diagnostics with one error per violation
        """
        diags = Diagnostics()

        for key in config:
            if key not in self.fields:
                diags.add_error(
                    "Unsupported argument",
                    f"An argument named {key!r} is not expected here",
                    attribute=f"{path}{key}",
                )

        checked_groups = set()

        for name, field in self.fields.items():
            attribute = f"{path}{name}"
            value = config.get(name)

            if field.computed and not field.optional:
                if not is_empty(value):
                    diags.add_error(
                        "Value for unconfigurable attribute",
                        f"{name!r} is computed and cannot be set",
                        attribute=attribute,
                    )
                continue

            if field.exactly_one_of:
                group = tuple(sorted(field.exactly_one_of))
                if group not in checked_groups:
                    checked_groups.add(group)
                    set_keys = [k for k in group if not is_empty(config.get(k))]
                    if len(set_keys) != 1:
                        detail = (
                            f"exactly one of ({', '.join(f'`{k}`' for k in field.exactly_one_of)}) "
                            "must be specified"
                        )
                        if set_keys:
                            detail += f", got: {', '.join(set_keys)}"
                        diags.add_error(
                            "Invalid combination of arguments",
                            detail,
                            attribute=f"{path}{set_keys[0] if set_keys else name}",
                        )

            if value is None:
                if field.required:
                    diags.add_error(
                        "Missing required argument",
                        f"The argument {name!r} is required, but no definition was found",
                        attribute=attribute,
                    )
                continue

            type_error = self._check_type(field, value)
            if type_error:
                diags.add_error("Incorrect attribute value type", type_error, attribute=attribute)
                continue

            if field.type in (FieldType.LIST, FieldType.SET):
                if field.max_items is not None and len(value) > field.max_items:
                    diags.add_error(
                        "Too many list items",
                        f"Attribute supports {field.max_items} item maximum, but config has {len(value)}",
                        attribute=attribute,
                    )
                if field.min_items is not None and len(value) < field.min_items:
                    diags.add_error(
                        "Not enough list items",
                        f"Attribute requires {field.min_items} item minimum, but config has {len(value)}",
                        attribute=attribute,
                    )

            if field.is_block:
                for index, item in enumerate(value):
                    diags.extend(field.elem.validate(item, path=f"{attribute}.{index}."))

            if field.validate is not None:
                for message in field.validate(value, name):
                    diags.add_error("Invalid value", message, attribute=attribute)

        return diags

    @staticmethod
    def _check_type(field: Field, value: Any) -> Optional[str]:
        if field.type == FieldType.STRING and not isinstance(value, str):
            return f"string required, got {type(value).__name__}"
        if field.type == FieldType.INT and (
            isinstance(value, bool) or not isinstance(value, int)
        ):
            return f"number required, got {type(value).__name__}"
        if field.type == FieldType.BOOL and not isinstance(value, bool):
            return f"bool required, got {type(value).__name__}"
        if field.type == FieldType.MAP and not isinstance(value, dict):
            return f"map required, got {type(value).__name__}"
        if field.type in (FieldType.LIST, FieldType.SET) and not isinstance(value, list):
            return f"list required, got {type(value).__name__}"
        if field.is_block and not all(isinstance(item, dict) for item in value):
            return "block items must be mappings"
        if field.type == FieldType.SET and len(set(map(str, value))) != len(value):
            return "set elements must be unique"
        return None

    def changed_fields(
        self, old: Dict[str, Any], new: Dict[str, Any], data: Any = None
    ) -> List[str]:
        """
        List configurable fields whose value differs between old and new.

        Args:
            old: Prior state values
            new: Normalized config values
            data: Object passed to diff suppressors (usually ResourceData)

        Returns:
            Field names in schema order
        """
        changed = []
        for name, field in self.fields.items():
            if field.computed and not field.optional:
                continue
            old_value, new_value = old.get(name), new.get(name)
            if values_equal(field, old_value, new_value):
                continue
            if field.diff_suppress is not None and field.diff_suppress(
                name, old_value, new_value, data if data is not None else new
            ):
                continue
            changed.append(name)
        return changed
