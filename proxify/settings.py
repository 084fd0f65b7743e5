"""Configuration for a proxying pass."""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = ["ProxifySettings", "DEFAULT_SETTINGS"]


class ProxifySettings(BaseModel):
    """Options shared by the interceptors and the orchestrator.

    Attributes:
        root_name: Documented name of the root class; namespaced classes are
            documented as ``"<root_name>.<Class>"``.
        reference_url: Prefix of the online reference, completed with
            ``"<class>/<member>"`` in help texts.
        private_prefix: Members whose name starts with this prefix are never
            intercepted.
        validate_arguments: When False, intercepted methods skip argument
            validation but still carry help text.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    root_name: str = "p5"
    reference_url: str = "http://p5js.org/reference/#/"
    private_prefix: str = "_"
    validate_arguments: bool = True

    @field_validator("root_name")
    @classmethod
    def _check_root_name(cls, value: str) -> str:
        if not value or "." in value:
            raise ValueError("root_name must be a non-empty name without dots")
        return value

    @property
    def class_pattern(self) -> "re.Pattern[str]":
        """Pattern matching ``"<root>.<Class>"`` and capturing ``<Class>``."""
        return re.compile(rf"^{re.escape(self.root_name)}\.([^.]+)$")

    def reference_for(self, class_name: Optional[str], member_name: Any) -> str:
        return f"{self.reference_url}{class_name}/{member_name}"


DEFAULT_SETTINGS = ProxifySettings()
