"""cpln-provider CLI commands"""

from .validate import validate
from .plan import plan
from .apply import apply
from .destroy import destroy
from .import_cmd import import_resource

__all__ = [
    "validate",
    "plan",
    "apply",
    "destroy",
    "import_resource",
]
