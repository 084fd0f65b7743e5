"""Exceptions and naming helpers shared across proxify.

This module defines a small hierarchy of rich exceptions used by the
interceptors, the proxy registry and the validators, plus simple helpers.

Exceptions:
    ProxifyError: Base class carrying `suggestions` and `context` metadata.
    ConstructionConflict: Raised when a class would be proxied twice.
    ArgumentViolation: Raised by validators when call arguments are invalid.
    RegistryError: Raised when a proxy lookup misses.
    MetadataError: Raised when the documentation database is malformed.

Helpers:
    get_type_name(cls, qualname=False): Return a human-readable type name.
    get_func_name(func, qualname=False): Return a human-readable function name.
"""

from inspect import isclass
from typing import Any, Callable, Dict, List, Optional


class ProxifyError(Exception):
    """Base exception with structured context.

    Attributes:
        message: Human-readable error text.
        suggestions: List of short, imperative hints for remediation.
        context: Free-form key/value details safe to log and render.
    """

    def __init__(
        self,
        message: str,
        suggestions: Optional[List[str]] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.suggestions = suggestions or []
        self.context = context or {}
        super().__init__(self._build_enhanced_message())

    def _build_enhanced_message(self) -> str:
        """Embed key context and suggestions into the exception string."""
        lines = [self.message]

        if self.context:
            if "expected" in self.context and "actual" in self.context:
                lines.append(f"  Expected: {self.context['expected']}")
                lines.append(f"  Actual: {self.context['actual']}")
            if "class_name" in self.context:
                lines.append(f"  Class: {self.context['class_name']}")

        if self.suggestions:
            lines.append("  Suggestions:")
            for suggestion in self.suggestions:
                lines.append(f"    • {suggestion}")

        return "\n".join(lines)


class ConstructionConflict(ProxifyError):
    """Raised when a proxy already exists for the class being proxied."""


class ArgumentViolation(ProxifyError, TypeError):
    """Raised when an intercepted method is called with invalid arguments."""


class RegistryError(ProxifyError, KeyError):
    """Raised when a proxy or original is not registered."""

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the enhanced message
        return self.args[0] if self.args else self.message


class MetadataError(ProxifyError, ValueError):
    """Raised when the documentation database cannot be parsed."""


def get_type_name(cls: type, qualname: bool = False) -> str:
    """Return a readable name for a type.

    Args:
        cls: The class or type object.
        qualname: If True, return the qualified name when available.

    Returns:
        The type's `__qualname__`, `__name__`, or a string fallback.
    """
    if not isclass(cls):
        raise ProxifyError(f"{cls} is not a class")
    if qualname and hasattr(cls, "__qualname__"):
        return getattr(cls, "__qualname__")
    elif hasattr(cls, "__name__"):
        return getattr(cls, "__name__")
    else:
        return str(cls)


def get_func_name(func: Callable[..., Any], qualname: bool = False) -> str:
    """Return a readable name for a function.

    Args:
        func: The function object.
        qualname: If True, return the qualified name when available.

    Returns:
        The function's `__qualname__`, `__name__`, or a string fallback.
    """
    if not callable(func):
        raise ProxifyError(f"{func} is not callable")
    while hasattr(func, "__wrapped__"):
        func = getattr(func, "__wrapped__")
    return getattr(func, "__qualname__" if qualname else "__name__", str(func))


def is_private(name: str, prefix: str = "_") -> bool:
    """Return True if `name` follows the private-member naming convention."""
    return bool(prefix) and name.startswith(prefix)


def is_class_name(name: str) -> bool:
    """Return True if `name` is capitalized the way class names are."""
    return name[:1].isupper()
