r"""Argument validators consulted by intercepted methods.

A validator is any object with a ``validate(original_fn, this_arg, args,
metadata)`` method that returns normally for acceptable calls and raises
`ArgumentViolation` otherwise. Calls made with keyword arguments also pass
them as ``kwargs=``. Two implementations ship with the package:

  - `NullValidator` accepts every call.
  - `ArgumentValidator` checks argument counts and documented parameter
    types (``Number``, ``String``, ``p5.Vector``, ``Number|String``, ...).
    Keyword arguments are matched to documented parameters by name.
"""

from __future__ import annotations

import logging
import numbers
from typing import (
    Any,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Set,
    Tuple,
)

from typing_extensions import Protocol, runtime_checkable

from .schema import ClassItem, Param
from .utils import ArgumentViolation, get_func_name

logger = logging.getLogger(__name__)

__all__ = ["Validator", "NullValidator", "ArgumentValidator"]


@runtime_checkable
class Validator(Protocol):
    """Contract of the argument validation collaborator."""

    def validate(
        self,
        original_fn: Callable[..., Any],
        this_arg: Any,
        args: Sequence[Any],
        metadata: ClassItem,
    ) -> None: ...


class NullValidator:
    """Validator that accepts every call."""

    def validate(
        self,
        original_fn: Callable[..., Any],
        this_arg: Any,
        args: Sequence[Any],
        metadata: ClassItem,
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> None:
        return None


def _is_number(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value: Any) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


_BUILTIN_CHECKS: Dict[str, Callable[[Any], bool]] = {
    "Number": _is_number,
    "Integer": _is_integer,
    "String": lambda v: isinstance(v, str),
    "Boolean": lambda v: isinstance(v, bool),
    "Array": lambda v: isinstance(v, (list, tuple)),
    "Object": lambda v: True,
    "Function": callable,
    "Constant": lambda v: isinstance(v, (str, numbers.Real)),
}


def _describe(value: Any) -> str:
    return "None" if value is None else type(value).__name__


# (position, value, param) for every argument matched to a documented param
Bound = List[Tuple[int, Any, Param]]


class ArgumentValidator:
    """Arity and documented-type checks for intercepted calls.

    Args:
        class_lookup: Resolves a documented class type such as
            ``"p5.Vector"`` to a class (or None when unknown). Unknown
            types always pass.
    """

    def __init__(self, class_lookup: Optional[Callable[[str], Optional[type]]] = None):
        self._class_lookup = class_lookup

    def validate(
        self,
        original_fn: Callable[..., Any],
        this_arg: Any,
        args: Sequence[Any],
        metadata: ClassItem,
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> None:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Validating %d argument(s) for %s",
                len(args) + len(kwargs or {}),
                metadata.qualified_name,
            )
        params = list(metadata.params)
        bound, filled = self._bind(original_fn, args, kwargs or {}, params, metadata)
        self._check_arity(original_fn, args, bound, filled, params, metadata)
        for position, value, param in bound:
            self._check_type(original_fn, position, value, param, metadata)

    @staticmethod
    def _arity(params: List[Param]) -> Tuple[int, Optional[int]]:
        required = sum(1 for p in params if not (p.optional or p.multiple))
        if any(p.multiple for p in params):
            return required, None
        return required, len(params)

    @staticmethod
    def _pair(
        args: Sequence[Any], params: List[Param]
    ) -> Iterator[Tuple[int, Any, Param]]:
        """Yield ``(param_index, value, param)``; variadics absorb the tail."""
        index = 0
        for value in args:
            if index >= len(params):
                return
            yield index, value, params[index]
            if not params[index].multiple:
                index += 1

    def _bind(
        self,
        original_fn: Callable[..., Any],
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
        params: List[Param],
        metadata: ClassItem,
    ) -> Tuple[Bound, Set[int]]:
        """Match positional then keyword arguments to documented params.

        Keywords naming no documented parameter are left to the original.
        """
        bound: Bound = []
        filled: Set[int] = set()
        for position, (index, value, param) in enumerate(self._pair(args, params)):
            bound.append((position, value, param))
            filled.add(index)
        by_name = {p.name: i for i, p in enumerate(params) if p.name}
        for key, value in kwargs.items():
            index = by_name.get(key)
            if index is None:
                continue
            if index in filled:
                name = metadata.name or get_func_name(original_fn)
                raise ArgumentViolation(
                    f"{name}() received multiple values for parameter '{key}'",
                    [f"Pass '{key}' either by position or by keyword"],
                    {"function": metadata.qualified_name, "position": index},
                )
            bound.append((index, value, params[index]))
            filled.add(index)
        return bound, filled

    def _check_arity(
        self,
        original_fn: Callable[..., Any],
        args: Sequence[Any],
        bound: Bound,
        filled: Set[int],
        params: List[Param],
        metadata: ClassItem,
    ) -> None:
        minimum, maximum = self._arity(params)
        name = metadata.name or get_func_name(original_fn)
        missing = [
            p.name
            for i, p in enumerate(params)
            if not (p.optional or p.multiple) and i not in filled
        ]
        if missing:
            raise ArgumentViolation(
                f"{name}() was expecting at least {minimum} argument(s), "
                f"but received {len(bound)}",
                [f"Pass a value for '{m}'" for m in missing],
                {
                    "function": metadata.qualified_name,
                    "expected": f">= {minimum} argument(s)",
                    "actual": f"{len(bound)} argument(s)",
                },
            )
        if maximum is not None and len(args) > maximum:
            raise ArgumentViolation(
                f"{name}() was expecting at most {maximum} argument(s), "
                f"but received {len(args)}",
                [f"Remove the extra {len(args) - maximum} argument(s)"],
                {
                    "function": metadata.qualified_name,
                    "expected": f"<= {maximum} argument(s)",
                    "actual": f"{len(args)} argument(s)",
                },
            )

    def _accepts(self, type_name: str, value: Any) -> bool:
        check = _BUILTIN_CHECKS.get(type_name)
        if check is not None:
            if value is None:
                return type_name == "Object"
            return check(value)
        if self._class_lookup is None:
            return True
        cls = self._class_lookup(type_name)
        if cls is None:
            return True
        return isinstance(value, cls)

    def _check_type(
        self,
        original_fn: Callable[..., Any],
        position: int,
        value: Any,
        param: Param,
        metadata: ClassItem,
    ) -> None:
        alternatives = param.types
        if not alternatives:
            return
        if any(self._accepts(t, value) for t in alternatives):
            return
        name = metadata.name or get_func_name(original_fn)
        expected = " or ".join(alternatives)
        raise ArgumentViolation(
            f"{name}() was expecting {expected} for parameter #{position} "
            f"({param.name or 'unnamed'}), received {_describe(value)} instead",
            [f"Pass a {alternatives[0]} as argument #{position}"],
            {
                "function": metadata.qualified_name,
                "expected": expected,
                "actual": _describe(value),
                "position": position,
            },
        )
