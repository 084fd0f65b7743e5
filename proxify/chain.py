r"""Observable parent links and the chain-repair post-pass.

Every class has a *real* parent (its first base) and an *observable* parent
answered by `parent_of`. For ordinary classes both are the same. Proxy
classes and chain-repair overrides are created with `ChainLinkMeta`, whose
``__parent__`` trap reports the registered proxy of the real parent when
there is one. `isinstance`/`issubclass` against such classes walk the
observable chain (`iter_chain`) before falling back to the native MRO, so
type checks mirror the *proxied* ancestry rather than the raw one.

`ChainRepair` runs once after the direct proxying pass and gives
un-proxied namespace classes an observable parent pointing at a proxy when
their real parent was proxied. Only one level of ancestry is inspected: a
class separated from a proxied ancestor by two or more un-proxied classes
is not repaired.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from inspect import isclass
from threading import RLock
from typing import TYPE_CHECKING, Any, Dict, Iterator, List, Optional, Type

from .utils import get_type_name, is_class_name

if TYPE_CHECKING:
    from .registry import ProxyRegistry

logger = logging.getLogger(__name__)

__all__ = [
    "ChainLinkMeta",
    "ChainRepair",
    "build_linked_class",
    "is_linked_class",
    "iter_chain",
    "parent_of",
    "real_parent_of",
]


def real_parent_of(cls: type) -> Optional[type]:
    """Return the first base of `cls`, or None for `object`."""
    bases = cls.__bases__
    return bases[0] if bases else None


def parent_of(cls: type) -> Optional[type]:
    """Return the observable parent of `cls`, honouring ``__parent__`` traps."""
    trap = getattr(type(cls), "__parent__", None)
    if trap is not None:
        return trap(cls)
    return real_parent_of(cls)


def iter_chain(cls: type) -> Iterator[type]:
    """Yield the observable ancestors of `cls`, nearest first."""
    seen = {id(cls)}
    parent = parent_of(cls)
    while parent is not None and id(parent) not in seen:
        seen.add(id(parent))
        yield parent
        parent = parent_of(parent)


class ChainLinkMeta(type):
    """Metaclass answering parent-link queries through the proxy registry.

    Classes built with it carry two entries in their own ``__dict__``:
    ``__proxy_target__`` (the original class) and ``__proxy_registry__``.
    Plain subclasses of such a class inherit the metaclass but not the
    role, so their parent link stays the native one.
    """

    def __parent__(cls) -> Optional[type]:
        own = vars(cls)
        target = own.get("__proxy_target__")
        if target is None:
            return real_parent_of(cls)
        parent = real_parent_of(target)
        registry: "ProxyRegistry" = own["__proxy_registry__"]
        if parent is not None and registry.has_proxy_for(parent):
            return registry.proxy_for(parent)
        return parent

    def __instancecheck__(cls, instance: Any) -> bool:
        if super().__instancecheck__(instance):
            return True
        return any(link is cls for link in iter_chain(type(instance)))

    def __subclasscheck__(cls, subclass: type) -> bool:
        if super().__subclasscheck__(subclass):
            return True
        return any(link is cls for link in iter_chain(subclass))


_derived_metaclasses: Dict[tuple, type] = {}


def _derive_metaclass(meta: Type[ChainLinkMeta], original_meta: type) -> type:
    """Return a metaclass combining `meta` with the original class's metaclass."""
    if issubclass(original_meta, meta):
        return original_meta
    if original_meta is type:
        return meta
    key = (meta, original_meta)
    if key not in _derived_metaclasses:
        _derived_metaclasses[key] = type(
            f"{meta.__name__}[{original_meta.__name__}]", (meta, original_meta), {}
        )
    return _derived_metaclasses[key]


_MISSING = object()
_hook_lock = RLock()


def _skip_init_subclass(cls: type, **kwargs: Any) -> None:
    pass


@contextmanager
def _subclass_hook_suppressed(target: type) -> Iterator[None]:
    """Keep a custom ``__init_subclass__`` of `target` from seeing linked classes.

    While active, `target` carries a no-op hook in its own ``__dict__``; the
    previous entry (or its absence) is restored on exit.
    """
    hooked = target.__mro__[:-1]
    if not any("__init_subclass__" in vars(klass) for klass in hooked):
        yield
        return
    with _hook_lock:
        own = vars(target).get("__init_subclass__", _MISSING)
        type.__setattr__(
            target, "__init_subclass__", classmethod(_skip_init_subclass)
        )
        try:
            yield
        finally:
            if own is _MISSING:
                type.__delattr__(target, "__init_subclass__")
            else:
                type.__setattr__(target, "__init_subclass__", own)


def build_linked_class(
    meta: Type[ChainLinkMeta],
    target: type,
    registry: "ProxyRegistry",
    members: Optional[Dict[str, Any]] = None,
) -> type:
    """Create a subclass of `target` whose parent link goes through `registry`.

    The new class keeps the name, qualified name, module and docstring of
    `target` and adds no instance layout of its own. The ``__init_subclass__``
    hooks of `target` and its bases do not run for it; they still run for
    classes deriving from it later.
    """
    namespace: Dict[str, Any] = {
        "__slots__": (),
        "__module__": target.__module__,
        "__qualname__": target.__qualname__,
        "__doc__": target.__doc__,
        "__proxy_target__": target,
        "__proxy_registry__": registry,
    }
    namespace.update(members or {})
    derived = _derive_metaclass(meta, type(target))
    with _subclass_hook_suppressed(target):
        return derived(target.__name__, (target,), namespace)


def is_linked_class(obj: Any) -> bool:
    """Return True if `obj` is a proxy or chain-repair override."""
    return isinstance(type(obj), ChainLinkMeta) and "__proxy_target__" in vars(obj)


class ChainRepair:
    """Post-pass pointing un-proxied subclasses at their proxied parent."""

    def __init__(self, registry: "ProxyRegistry"):
        self.registry = registry

    def candidates(self, namespace: Any) -> List[tuple]:
        """Return ``(name, cls)`` namespace entries needing a repaired link.

        Candidates are computed against the registry as it stands before any
        override is built, so repairs never cascade into deeper levels.
        """
        found = []
        for name, value in list(vars(namespace).items()):
            if not (is_class_name(name) and isclass(value)):
                continue
            if self.registry.is_proxy(value):
                continue
            parent = real_parent_of(value)
            if parent is None or not self.registry.has_proxy_for(parent):
                continue
            found.append((name, value))
        return found

    def override(self, cls: type) -> type:
        """Build the thin override of `cls`; only its parent link differs."""
        override = build_linked_class(ChainLinkMeta, cls, self.registry)
        self.registry.register_override(cls, override)
        return override

    def run(self, namespace: Any) -> List[type]:
        """Repair the namespace in place and return the overrides built."""
        self._adopt_aliases(namespace)
        repaired: List[type] = []
        built: Dict[int, type] = {}
        for name, cls in self.candidates(namespace):
            if id(cls) not in built:
                built[id(cls)] = self.override(cls)
                repaired.append(built[id(cls)])
            setattr(namespace, name, built[id(cls)])
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(
                    "Repaired parent link of %s -> %s",
                    name,
                    get_type_name(parent_of(built[id(cls)])),
                )
        logger.info("Chain repair: %d class(es) repaired", len(repaired))
        return repaired

    def _adopt_aliases(self, namespace: Any) -> None:
        """Point extra names bound to a directly proxied original at its proxy."""
        for name, value in list(vars(namespace).items()):
            if isclass(value) and self.registry.has_proxy_for(value):
                setattr(namespace, name, self.registry.proxy_for(value))
