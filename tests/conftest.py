"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import copy
from types import SimpleNamespace
from typing import Any, Dict, List

import pytest

from proxify import ArgumentViolation, ClassRegistry, MethodInterceptor, ProxyRegistry
from proxify.prototype import PrototypeInterceptor

# =============================================================================
# Documentation database
# =============================================================================

DOCS: Dict[str, Any] = {
    "classes": {
        "p5": {"name": "p5"},
        "p5.Vector": {"name": "p5.Vector"},
        "p5.Renderer": {"name": "p5.Renderer"},
        "p5.SoundFile": {"name": "p5.SoundFile"},
    },
    "classitems": [
        {
            "class": "p5",
            "name": "background",
            "itemtype": "method",
            "description": "Sets the color used for the background.",
            "params": [{"name": "v1", "type": "Number|String"}],
        },
        {"class": "p5", "name": "_private", "description": "Internal helper."},
        {
            "class": "p5.Vector",
            "name": "add",
            "itemtype": "method",
            "description": "Adds x and y components to a vector.",
            "params": [
                {"name": "x", "type": "Number|p5.Vector"},
                {"name": "y", "type": "Number", "optional": True},
            ],
        },
        {
            "class": "p5.Vector",
            "name": "mag",
            "itemtype": "method",
            "description": "Calculates the magnitude of the vector.",
        },
        {"class": "p5.Vector", "name": "ZERO", "description": "Zero constant."},
        {"class": "p5.Vector", "description": "A record without a name."},
        {
            "class": "p5.Renderer",
            "name": "resize",
            "itemtype": "method",
            "description": "Resizes the renderer.",
            "params": [
                {"name": "w", "type": "Number"},
                {"name": "h", "type": "Number"},
            ],
        },
        {
            "class": "p5.SoundFile",
            "name": "play",
            "description": "Plays the sound file.",
        },
    ],
}


@pytest.fixture
def docs_data() -> Dict[str, Any]:
    """A fresh copy of the decoded documentation database."""
    return copy.deepcopy(DOCS)


@pytest.fixture
def docs(docs_data) -> ClassRegistry:
    return ClassRegistry.from_dict(docs_data)


# =============================================================================
# Host namespace
# =============================================================================


@pytest.fixture
def host() -> SimpleNamespace:
    """A fresh host namespace: a root class, namespaced classes, a subclass."""

    class Sketch:
        def __init__(self):
            self.log: List[tuple] = []

        def background(self, *args):
            self.log.append(("background",) + args)
            return self

        def _private(self):
            return "private"

        def undocumented(self):
            return "undocumented"

    class Vector:
        ZERO = 0

        def __init__(self, x=0, y=0):
            self.x = x
            self.y = y

        def add(self, x, y=0):
            if isinstance(x, Vector):
                x, y = x.x, x.y
            self.x += x
            self.y += y
            return self

        def mag(self):
            return (self.x**2 + self.y**2) ** 0.5

    class Renderer:
        def resize(self, w, h):
            return (w, h)

    class Renderer2D(Renderer):
        def line(self, *args):
            return args

    return SimpleNamespace(
        p5=Sketch,
        Vector=Vector,
        Renderer=Renderer,
        Renderer2D=Renderer2D,
    )


# =============================================================================
# Collaborators
# =============================================================================


class RecordingValidator:
    """Validator recording every call; optionally rejects all of them."""

    def __init__(self, fail: bool = False):
        self.calls: List[tuple] = []
        self.kwargs: List[dict] = []
        self.fail = fail

    def validate(self, original_fn, this_arg, args, metadata, kwargs=None) -> None:
        self.calls.append((original_fn, this_arg, tuple(args), metadata))
        self.kwargs.append(dict(kwargs or {}))
        if self.fail:
            raise ArgumentViolation(
                f"{metadata.name}() rejected",
                ["Pass different arguments"],
                {"function": metadata.qualified_name},
            )


@pytest.fixture
def validator() -> RecordingValidator:
    return RecordingValidator()


@pytest.fixture
def rejecting_validator() -> RecordingValidator:
    return RecordingValidator(fail=True)


@pytest.fixture
def proxies() -> ProxyRegistry:
    return ProxyRegistry()


@pytest.fixture
def interceptor(docs, proxies, validator) -> PrototypeInterceptor:
    return PrototypeInterceptor(docs, proxies, MethodInterceptor(validator))
