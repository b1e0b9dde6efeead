"""Constant resolution for bracketed references in tag attribute values.

A reference has the form ``<type-path>#<member-name>``, e.g.
``myservice.api.Service#NAME``. The registry table is consulted first;
unregistered paths fall back to importing the type path and reading the
member from it.

Example:
    >>> registry = ConstantRegistry()
    >>> registry.register("com.x.Svc#NAME", "health")
    >>> registry.resolve("com.x.Svc#NAME")
    'health'
"""
import importlib
import inspect
from enum import Enum
from types import ModuleType
from typing import Any, Dict, Tuple

from .errors import BadReferenceError
from .logging import logger


def split_path(path: str) -> Tuple[str, str]:
    """Split ``path`` on the first ``#`` into (type path, member name).

    Raises:
        BadReferenceError: If either part is missing or empty
    """
    type_path, sep, member = path.partition("#")
    if not sep or not type_path or not member:
        raise BadReferenceError(f"Invalid path: {path}", details={"path": path})
    return type_path, member


def to_text(value: Any) -> str:
    """Natural string rendering of a constant value."""
    if isinstance(value, Enum):
        value = value.value
    return str(value)


def _is_constant(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, ModuleType) or inspect.isclass(value):
        return False
    return not callable(value)


def _import_type(type_path: str) -> Any:
    """Import the longest module prefix of ``type_path`` and walk the rest."""
    parts = type_path.split(".")
    for i in range(len(parts), 0, -1):
        module_name = ".".join(parts[:i])
        try:
            target = importlib.import_module(module_name)
        except ImportError:
            continue
        for attr in parts[i:]:
            target = getattr(target, attr)
        return target
    raise ImportError(f"No module found for {type_path}")


class ConstantRegistry:
    """Symbolic constants available to tag attribute values."""

    def __init__(self) -> None:
        self._constants: Dict[str, Any] = {}

    def register(self, path: str, value: Any) -> None:
        split_path(path)
        self._constants[path] = value

    def register_module(self, module: Any, type_path: str | None = None) -> int:
        """Register every upper-case attribute of ``module`` (a module or class).

        Args:
            module: Module or class object, or a dotted module name to import
            type_path: Name used left of ``#`` (default: the object's dotted name)

        Returns:
            Number of constants registered
        """
        if isinstance(module, str):
            module = importlib.import_module(module)
        if type_path is None:
            if isinstance(module, ModuleType):
                type_path = module.__name__
            else:
                type_path = f"{module.__module__}.{module.__qualname__}"
        count = 0
        for name, value in vars(module).items():
            if name.isupper() and _is_constant(value):
                self._constants[f"{type_path}#{name}"] = value
                count += 1
        logger.debug("Registered %d constants from %s", count, type_path)
        return count

    def __contains__(self, path: str) -> bool:
        return path in self._constants

    def lookup(self, path: str) -> Any:
        """Return the raw value referenced by ``path``.

        Raises:
            BadReferenceError: If the path is malformed or does not resolve
                to a readable constant
        """
        type_path, member = split_path(path)
        if path in self._constants:
            return self._constants[path]

        if not all(part.isidentifier() for part in type_path.split(".")) or not member.isidentifier():
            raise BadReferenceError(f"Invalid path: {path}", details={"path": path})

        try:
            owner = _import_type(type_path)
            value = getattr(owner, member)
        except Exception as ex:  # import errors, or whatever the module raises on import
            logger.debug("Lookup of %s failed: %s", path, ex)
            raise BadReferenceError(
                f"Invalid path: {path}",
                details={"path": path, "cause": str(ex)}
            ) from ex

        if not _is_constant(value):
            raise BadReferenceError(
                f"Invalid path: {path}",
                details={"path": path, "cause": "not a constant value"}
            )
        return value

    def resolve(self, path: str) -> str:
        """Return the text of the constant referenced by ``path``."""
        return to_text(self.lookup(path))


default_registry = ConstantRegistry()
