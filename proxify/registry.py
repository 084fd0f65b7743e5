r"""Bidirectional identity map between original classes and their proxies.

The registry is the explicit type-relationship table consulted by
parent-link queries: a class whose real parent has a registered proxy
reports the proxy as its parent instead.
"""

from __future__ import annotations

import logging
from typing import Any, Iterator, Tuple

from .storage import IdentityStorage
from .utils import ConstructionConflict, RegistryError, get_type_name

logger = logging.getLogger(__name__)

__all__ = ["ProxyRegistry"]


def _name_of(obj: Any) -> str:
    return getattr(obj, "__qualname__", None) or repr(obj)


class ProxyRegistry:
    """Original <-> proxy map, 1:1 and append-only."""

    def __init__(self):
        self._proxies: IdentityStorage[Any] = IdentityStorage()
        self._originals: IdentityStorage[Any] = IdentityStorage()

    def register(self, original: Any, proxy: Any) -> None:
        """Record `proxy` as the only proxy of `original`.

        Raises:
            ConstructionConflict: if `original` already has a proxy, or if
                either object is already registered on the other side.
        """
        with self._proxies.lock:
            if original in self._proxies or original in self._originals:
                raise ConstructionConflict(
                    f"Proxy already exists for {_name_of(original)}",
                    [
                        "Run the proxying pass only once per process",
                        "Do not proxy a class that is itself a proxy",
                    ],
                    {"class_name": _name_of(original), "operation": "register"},
                )
            if proxy in self._originals or proxy in self._proxies:
                raise ConstructionConflict(
                    f"{_name_of(proxy)} is already registered",
                    ["Build a fresh proxy for each original"],
                    {"class_name": _name_of(proxy), "operation": "register"},
                )
            self._proxies[original] = proxy
            self._originals[proxy] = original
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Registered proxy for %s", _name_of(original))

    def register_override(self, original: Any, override: Any) -> None:
        """Record a chain-repair `override` of `original`.

        Overrides are known as proxies (`is_proxy`, `original_for`) but are
        never returned by `proxy_for`: parent links keep pointing at direct
        proxies only.
        """
        if not self._originals.set_if_absent(override, original):
            raise ConstructionConflict(
                f"{_name_of(override)} is already registered",
                ["Build a fresh override for each repaired class"],
                {"class_name": _name_of(override), "operation": "register_override"},
            )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Registered chain override for %s", _name_of(original))

    def has_proxy_for(self, obj: Any) -> bool:
        return obj in self._proxies

    def proxy_for(self, obj: Any) -> Any:
        """Return the proxy registered for `obj`.

        Raises:
            RegistryError: if `obj` has no proxy.
        """
        try:
            return self._proxies[obj]
        except KeyError:
            raise RegistryError(
                f"No proxy registered for {_name_of(obj)}",
                ["Use has_proxy_for() to check before looking up"],
                {"class_name": _name_of(obj), "registry_size": len(self)},
            ) from None

    def is_proxy(self, obj: Any) -> bool:
        return obj in self._originals

    def original_for(self, proxy: Any) -> Any:
        """Return the original a registered `proxy` stands for."""
        try:
            return self._originals[proxy]
        except KeyError:
            raise RegistryError(
                f"{_name_of(proxy)} is not a registered proxy",
                ["Use is_proxy() to check before looking up"],
                {"class_name": _name_of(proxy), "registry_size": len(self)},
            ) from None

    def items(self) -> Iterator[Tuple[Any, Any]]:
        """Yield ``(original, proxy)`` pairs in registration order."""
        for original in self._proxies:
            yield original, self._proxies[original]

    def __contains__(self, obj: object) -> bool:
        return obj in self._proxies or obj in self._originals

    def __len__(self) -> int:
        return len(self._proxies)

    def __repr__(self) -> str:
        names = ", ".join(
            get_type_name(o) if isinstance(o, type) else _name_of(o)
            for o in self._proxies
        )
        return f"{type(self).__name__}([{names}])"
