r"""Documentation database: classes and member records parsed with Pydantic.

The database mirrors the layout of a YUIDoc ``data.json`` export:

  - ``classes``: mapping of class name (``"p5"``, ``"p5.Vector"``) to a
    presence marker (usually the class record itself);
  - ``classitems``: ordered list of member records, each naming its
    ``class``, its ``name`` and a ``description``, plus parameter data
    consumed by the argument validator.

Records are frozen after parsing; unknown fields are preserved so that
validators can read whatever extra signature data the docs carry.

Usage
-----
    from proxify.schema import ClassRegistry

    docs = ClassRegistry.from_file("docs/reference/data.json")
    for item in docs.items_for("p5.Vector"):
        print(item.name, item.description)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from .utils import MetadataError

logger = logging.getLogger(__name__)

__all__ = ["Param", "ClassItem", "ClassRegistry"]


class Param(BaseModel):
    """One documented parameter of a method."""

    model_config = ConfigDict(frozen=True, extra="allow")

    name: str = ""
    type: str = ""
    description: str = ""
    optional: bool = False
    multiple: bool = False

    @property
    def types(self) -> List[str]:
        """Return the alternatives of a ``A|B`` union type, stripped."""
        return [part.strip() for part in self.type.split("|") if part.strip()]


class ClassItem(BaseModel):
    """A documentation-derived member record.

    ``class`` is a reserved word in Python, so the field is exposed as
    ``class_`` and read/written under the ``class`` alias.
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    class_: Optional[str] = Field(default=None, alias="class")
    name: Optional[str] = None
    description: str = ""
    params: List[Param] = Field(default_factory=list)
    return_: Optional[Dict[str, Any]] = Field(default=None, alias="return")

    @property
    def qualified_name(self) -> str:
        return f"{self.class_}.{self.name}"


class ClassRegistry(BaseModel):
    """Parsed documentation database."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    classes: Dict[str, Any] = Field(default_factory=dict)
    classitems: List[ClassItem] = Field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ClassRegistry":
        """Build a registry from already-decoded JSON data.

        Raises:
            MetadataError: if the data does not match the expected layout.
        """
        try:
            registry = cls.model_validate(dict(data))
        except PydanticValidationError as e:
            raise MetadataError(
                f"Malformed documentation database: {e.error_count()} error(s)",
                [
                    "Provide a mapping with 'classes' and 'classitems' keys",
                    "Each classitem must be an object with string fields",
                ],
                {"errors": e.errors(include_url=False)},
            ) from e
        except TypeError as e:
            raise MetadataError(
                f"Documentation database must be a mapping, got {type(data).__name__}",
                ["Pass the decoded contents of data.json"],
                {"actual": type(data).__name__, "expected": "mapping"},
            ) from e
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Loaded documentation database: %d class(es), %d item(s)",
                len(registry.classes),
                len(registry.classitems),
            )
        return registry

    @classmethod
    def from_json(cls, text: Union[str, bytes]) -> "ClassRegistry":
        """Build a registry from a JSON document."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MetadataError(
                f"Documentation database is not valid JSON: {e.msg}",
                ["Regenerate the docs export"],
                {"line": e.lineno, "column": e.colno},
            ) from e
        if not isinstance(data, Mapping):
            raise MetadataError(
                f"Documentation database must be a JSON object, got {type(data).__name__}",
                ["Pass the data.json produced by the docs build"],
                {"actual": type(data).__name__, "expected": "object"},
            )
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ClassRegistry":
        """Build a registry from a JSON file on disk."""
        filepath = Path(path)
        try:
            text = filepath.read_text(encoding="utf-8")
        except OSError as e:
            raise MetadataError(
                f"Cannot read documentation database: {filepath}",
                ["Check that the path exists and is readable"],
                {"path": str(filepath), "reason": str(e)},
            ) from e
        return cls.from_json(text)

    def class_names(self) -> List[str]:
        """Return the documented class names in document order."""
        return list(self.classes.keys())

    def items_for(self, class_name: str) -> Iterator[ClassItem]:
        """Yield the named member records documented for `class_name`.

        Records without a ``name`` are skipped; some generated docs omit it.
        """
        for item in self.classitems:
            if item.class_ == class_name and item.name:
                yield item
