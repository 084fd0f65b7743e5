r"""Class proxies that intercept documented methods.

`PrototypeInterceptor.create(class_name, cls)` returns a proxy class: a
subclass of `cls` built with `ProxyMeta`, indistinguishable from `cls` by
name, module and layout, that

  - installs a lazy `DocumentedMember` descriptor for every documented,
    non-private member name that is not a data descriptor (properties and
    slots keep handling reads and writes). On read the descriptor looks at
    the member's *current* value on the original class: a plain function is
    replaced by a cached `InterceptedMethod` (built on first read), anything
    else is returned untouched;
  - answers parent-link queries with the proxy of its real parent when one
    is registered (see `proxify.chain`);
  - is registered in the `ProxyRegistry` before being returned.

Undocumented and private members are never wrapped, so classes pay only
for the methods that are both documented and actually used.
"""

from __future__ import annotations

import inspect
import logging
from types import MappingProxyType
from typing import Any, Dict, Optional

from .chain import ChainLinkMeta, build_linked_class, is_linked_class
from .method import InterceptedMethod, MethodInterceptor
from .registry import ProxyRegistry
from .schema import ClassItem, ClassRegistry
from .settings import DEFAULT_SETTINGS, ProxifySettings
from .storage import WrapperCache
from .utils import ConstructionConflict, get_type_name, is_private

logger = logging.getLogger(__name__)

__all__ = ["DocumentedMember", "PrototypeInterceptor", "ProxyMeta"]


class ProxyMeta(ChainLinkMeta):
    """Metaclass of class proxies built by `PrototypeInterceptor`."""


def _lookup_raw(cls: type, name: str) -> Any:
    """Return the undecorated value of `name` along the MRO of `cls`."""
    for klass in cls.__mro__:
        namespace = vars(klass)
        if name in namespace:
            return namespace[name]
    raise AttributeError(f"type object {cls.__name__!r} has no attribute {name!r}")


def _is_data_descriptor(cls: type, name: str) -> bool:
    """Return True if `name` resolves to a property, slot or other data descriptor."""
    try:
        value = _lookup_raw(cls, name)
    except AttributeError:
        return False
    return inspect.isdatadescriptor(value)


class DocumentedMember:
    """Non-data descriptor standing in for one documented member.

    Instance attributes shadow it and subclasses may override it, exactly as
    they would shadow or override the original member.
    """

    def __init__(
        self,
        name: str,
        metadata: ClassItem,
        target: type,
        cache: "WrapperCache[str, InterceptedMethod]",
        interceptor: MethodInterceptor,
    ):
        self.name = name
        self.metadata = metadata
        self._target = target
        self._cache = cache
        self._interceptor = interceptor

    def resolve(self) -> Any:
        """Return the intercepted method, or the raw value if not a function."""
        value = _lookup_raw(self._target, self.name)
        if not inspect.isfunction(value):
            return value
        return self._cache.get_or_create(
            self.name, lambda: self._interceptor.wrap(value, self.metadata)
        )

    def __get__(self, instance: Any, owner: Optional[type] = None) -> Any:
        value = self.resolve()
        if hasattr(type(value), "__get__"):
            return type(value).__get__(value, instance, owner)
        return value

    def __repr__(self) -> str:
        return f"<documented member {self.metadata.qualified_name}>"


class PrototypeInterceptor:
    """Builds class proxies for one documentation database."""

    def __init__(
        self,
        docs: ClassRegistry,
        proxies: ProxyRegistry,
        methods: MethodInterceptor,
        settings: ProxifySettings = DEFAULT_SETTINGS,
    ):
        self.docs = docs
        self.proxies = proxies
        self.methods = methods
        self.settings = settings

    def member_index(self, class_name: str) -> Dict[str, ClassItem]:
        """Map member names of `class_name` to their records; later ones win."""
        index: Dict[str, ClassItem] = {}
        for item in self.docs.items_for(class_name):
            if item.name in index:
                logger.warning(
                    "Duplicate definition for %s.%s: %r", class_name, item.name, item
                )
            index[item.name] = item
        return index

    def create(self, class_name: str, cls: type) -> type:
        """Return a new proxy for `cls` documented as `class_name`.

        Raises:
            ConstructionConflict: if `cls` is already proxied or is a proxy.
        """
        if (
            self.proxies.has_proxy_for(cls)
            or self.proxies.is_proxy(cls)
            or is_linked_class(cls)
        ):
            raise ConstructionConflict(
                f"Proxy already exists for {class_name}",
                [
                    "Run the proxying pass only once per process",
                    "Do not proxy a class that is itself a proxy",
                ],
                {"class_name": class_name, "operation": "create"},
            )
        index = self.member_index(class_name)
        cache: WrapperCache[str, InterceptedMethod] = WrapperCache()
        members: Dict[str, Any] = {
            name: DocumentedMember(name, item, cls, cache, self.methods)
            for name, item in index.items()
            if not is_private(name, self.settings.private_prefix)
            and not _is_data_descriptor(cls, name)
        }
        members["__proxy_class_name__"] = class_name
        members["__proxy_members__"] = MappingProxyType(index)
        members["__proxy_cache__"] = cache
        proxy = build_linked_class(ProxyMeta, cls, self.proxies, members)
        self.proxies.register(cls, proxy)
        logger.info(
            "Proxied %s (%s): %d documented member(s)",
            class_name,
            get_type_name(cls),
            len(index),
        )
        return proxy
