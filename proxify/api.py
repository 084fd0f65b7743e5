"""User-facing entry point for proxify."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Union

from .proxifier import Proxifier
from .schema import ClassRegistry
from .settings import ProxifySettings
from .validator import Validator

__all__ = ["load_docs", "proxify"]

DocsSource = Union[ClassRegistry, Mapping[str, Any], str, Path]


def load_docs(docs: DocsSource) -> ClassRegistry:
    """Return a `ClassRegistry` from a registry, decoded JSON or a file path."""
    if isinstance(docs, ClassRegistry):
        return docs
    if isinstance(docs, (str, Path)):
        return ClassRegistry.from_file(docs)
    return ClassRegistry.from_dict(docs)


def proxify(
    namespace: Any,
    docs: DocsSource,
    validator: Optional[Validator] = None,
    **options: Any,
) -> None:
    """Intercept the documented methods of every class in `namespace`.

    Args:
        namespace: Module or attribute container holding the class tree.
        docs: Documentation database, decoded ``data.json`` or its path.
        validator: Optional argument validator.
        **options: `ProxifySettings` fields, e.g. ``root_name="p5"``.
    """
    settings = ProxifySettings(**options)
    Proxifier(namespace, load_docs(docs), validator=validator, settings=settings).run()
