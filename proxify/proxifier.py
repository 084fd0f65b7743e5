r"""The proxying pass over one host namespace.

`Proxifier.run()` enumerates the documented class names:

  - the root name (``"p5"``) is proxied as ``namespace.p5``;
  - names of the form ``"p5.Vector"`` are resolved to ``namespace.Vector``;
    when that is a class it is proxied and written back, otherwise the docs
    describe an optional module that is not loaded and the name is skipped;
  - any other name is reported as unrecognized.

Chain repair then runs exactly once. The namespace is mutated in place and
nothing is returned; the pass is meant to run once per process.
"""

from __future__ import annotations

import logging
from inspect import isclass
from typing import Any, Optional

from .chain import ChainRepair
from .method import MethodInterceptor
from .prototype import PrototypeInterceptor
from .registry import ProxyRegistry
from .schema import ClassRegistry
from .settings import DEFAULT_SETTINGS, ProxifySettings
from .utils import ConstructionConflict
from .validator import ArgumentValidator, Validator

logger = logging.getLogger(__name__)

__all__ = ["Proxifier"]


class Proxifier:
    """Wires the interceptors together for one namespace and docs database.

    Args:
        namespace: Module, class or any attribute container holding the root
            class and the namespaced classes.
        docs: The documentation database.
        validator: Argument validator; defaults to an `ArgumentValidator`
            resolving documented class types through `namespace`.
        settings: Pass configuration.
        proxies: Registry to record proxies in; a fresh one by default.
    """

    def __init__(
        self,
        namespace: Any,
        docs: ClassRegistry,
        validator: Optional[Validator] = None,
        settings: ProxifySettings = DEFAULT_SETTINGS,
        proxies: Optional[ProxyRegistry] = None,
    ):
        self.namespace = namespace
        self.docs = docs
        self.settings = settings
        self.proxies = proxies if proxies is not None else ProxyRegistry()
        if validator is None:
            validator = ArgumentValidator(class_lookup=self.resolve_class)
        self.methods = MethodInterceptor(validator, settings)
        self.prototypes = PrototypeInterceptor(
            docs, self.proxies, self.methods, settings
        )
        self.chain_repair = ChainRepair(self.proxies)
        self._ran = False

    def resolve_class(self, class_name: str) -> Optional[type]:
        """Return the namespace class documented as `class_name`, if loaded."""
        attr = self._attribute_for(class_name)
        if attr is None:
            return None
        value = getattr(self.namespace, attr, None)
        return value if isclass(value) else None

    def _attribute_for(self, class_name: str) -> Optional[str]:
        if class_name == self.settings.root_name:
            return class_name
        match = self.settings.class_pattern.match(class_name)
        return match.group(1) if match else None

    def run(self) -> None:
        """Proxy every documented class in the namespace, then repair chains.

        Raises:
            ConstructionConflict: if the pass already ran or a class is
                already proxied.
        """
        if self._ran:
            raise ConstructionConflict(
                "The proxying pass already ran for this namespace",
                ["Call run() once during initialization"],
                {"operation": "run"},
            )
        self._ran = True
        for class_name in self.docs.class_names():
            self._proxy_class(class_name)
        self.chain_repair.run(self.namespace)
        logger.info("Proxying pass complete: %d class(es) proxied", len(self.proxies))

    def _proxy_class(self, class_name: str) -> None:
        attr = self._attribute_for(class_name)
        if attr is None:
            logger.warning("Unrecognized class: %s", class_name)
            return
        cls = getattr(self.namespace, attr, None)
        if not isclass(cls):
            # Documented class of an optional module that is not loaded.
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug("Skipping %s: not present in namespace", class_name)
            return
        setattr(self.namespace, attr, self.prototypes.create(class_name, cls))
