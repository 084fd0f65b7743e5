r"""Validated, help-annotated wrappers around documented methods.

`MethodInterceptor.wrap(fn, metadata)` returns an `InterceptedMethod`:

  - calling it first runs the validator with ``(original_fn, this_arg, args,
    metadata)``, plus ``kwargs=`` for keyword calls; an `ArgumentViolation`
    propagates and the original is not called;
  - it is a descriptor, so reading it through an instance rebinds it into a
    *new* `InterceptedMethod` around the natively bound original, keeping
    validation on every bound copy;
  - its read-only ``help`` property formats a reference text on first read
    and returns the same string afterwards.
"""

from __future__ import annotations

import logging
from functools import update_wrapper
from types import MethodType
from typing import Any, Callable, Mapping, Optional, Sequence, Tuple

from .schema import ClassItem
from .settings import DEFAULT_SETTINGS, ProxifySettings
from .utils import get_func_name
from .validator import NullValidator, Validator

logger = logging.getLogger(__name__)

__all__ = ["InterceptedMethod", "MethodInterceptor"]


class InterceptedMethod:
    """Callable forwarding to a documented method after argument validation."""

    def __init__(
        self,
        fn: Callable[..., Any],
        metadata: ClassItem,
        interceptor: "MethodInterceptor",
    ):
        # update_wrapper copies fn.__dict__, so it must run before our own fields
        update_wrapper(self, fn)
        self._fn = fn
        self._metadata = metadata
        self._interceptor = interceptor
        self._help_text: Optional[str] = None

    @property
    def metadata(self) -> ClassItem:
        return self._metadata

    @property
    def help(self) -> str:
        """Reference text for the method, computed once on first read."""
        if self._help_text is None:
            if isinstance(self._fn, InterceptedMethod):
                self._help_text = self._fn.help
            else:
                self._help_text = self._interceptor.format_help(self._metadata)
        logger.info("%s", self._help_text)
        return self._help_text

    def _receiver(
        self, args: Tuple[Any, ...]
    ) -> Tuple[Callable[..., Any], Any, Tuple[Any, ...]]:
        """Split a call into ``(original_fn, this_arg, args)``."""
        fn = self._fn
        if isinstance(fn, InterceptedMethod):
            return fn._receiver(args)
        if isinstance(fn, MethodType):
            return fn.__func__, fn.__self__, args
        if args:
            return fn, args[0], args[1:]
        return fn, None, ()

    def __call__(self, *args: Any, **kwargs: Any) -> Any:
        original_fn, this_arg, call_args = self._receiver(args)
        self._interceptor.check(
            original_fn, this_arg, call_args, self._metadata, kwargs
        )
        return self._fn(*args, **kwargs)

    def bind(
        self, receiver: Any, owner: Optional[type] = None
    ) -> "InterceptedMethod":
        """Return a new intercepted method around ``fn`` bound to `receiver`."""
        fn = self._fn
        if owner is None:
            owner = type(receiver)
        if isinstance(fn, MethodType) or not hasattr(type(fn), "__get__"):
            # already bound, or not a descriptor: the receiver cannot change
            rebound = fn
        else:
            rebound = type(fn).__get__(fn, receiver, owner)
        return self._interceptor.wrap(rebound, self._metadata)

    def __get__(
        self, instance: Any, owner: Optional[type] = None
    ) -> "InterceptedMethod":
        if instance is None:
            return self
        return self.bind(instance, owner)

    def __getattr__(self, name: str) -> Any:
        try:
            fn = self.__dict__["_fn"]
        except KeyError:
            raise AttributeError(name) from None
        return getattr(fn, name)

    def __repr__(self) -> str:
        bound = " bound" if isinstance(self._fn, MethodType) else ""
        return f"<intercepted{bound} method {self._metadata.qualified_name}>"


class MethodInterceptor:
    """Builds `InterceptedMethod` objects sharing one validator and settings."""

    def __init__(
        self,
        validator: Optional[Validator] = None,
        settings: ProxifySettings = DEFAULT_SETTINGS,
    ):
        self.validator: Validator = (
            validator if validator is not None else NullValidator()
        )
        self.settings = settings

    def wrap(
        self, original_fn: Callable[..., Any], metadata: ClassItem
    ) -> InterceptedMethod:
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Wrapping %s as %s", get_func_name(original_fn), metadata.qualified_name
            )
        return InterceptedMethod(original_fn, metadata, self)

    def check(
        self,
        original_fn: Callable[..., Any],
        this_arg: Any,
        args: Sequence[Any],
        metadata: ClassItem,
        kwargs: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Run the validator unless validation is switched off.

        Keyword arguments are only handed over when the call has any.
        """
        if not self.settings.validate_arguments:
            return
        if kwargs:
            self.validator.validate(
                original_fn, this_arg, args, metadata, kwargs=kwargs
            )
        else:
            self.validator.validate(original_fn, this_arg, args, metadata)

    def format_help(self, metadata: ClassItem) -> str:
        url = self.settings.reference_for(metadata.class_, metadata.name)
        return (
            f"{metadata.name}()\n\n{metadata.description}\n\n"
            f"For more information, see: {url}"
        )
