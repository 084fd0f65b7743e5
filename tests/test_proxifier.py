import json
import logging
from types import ModuleType

import pytest

from proxify import (
    ArgumentViolation,
    ChainLinkMeta,
    ClassRegistry,
    ConstructionConflict,
    InterceptedMethod,
    Proxifier,
    ProxifySettings,
    ProxyMeta,
    proxify,
)

# -------------------------------------------------------------------
# Full pass
# -------------------------------------------------------------------


def test_run_proxies_documented_classes(host, docs, validator):
    originals = dict(vars(host))

    result = Proxifier(host, docs, validator=validator).run()

    assert result is None
    for name in ("p5", "Vector", "Renderer"):
        assert isinstance(getattr(host, name), ProxyMeta)
        assert issubclass(getattr(host, name), originals[name])
    assert isinstance(type(host.Renderer2D), ChainLinkMeta)
    assert not isinstance(host.Renderer2D, ProxyMeta)


def test_run_keeps_type_checks_working(host, docs, validator):
    Proxifier(host, docs, validator=validator).run()

    assert isinstance(host.Renderer2D(), host.Renderer)
    assert isinstance(host.Vector(), host.Vector)
    assert not isinstance(host.Vector(), host.Renderer)


def test_call_is_validated_with_original_receiver_and_args(host, docs, validator):
    original_add = vars(host.Vector)["add"]
    Proxifier(host, docs, validator=validator).run()
    v = host.Vector(1, 1)

    v.add(2, 3)

    assert validator.calls == [
        (original_add, v, (2, 3), docs.classitems[2]),
    ]


def test_rejected_call_does_not_run_original(host, docs, rejecting_validator):
    Proxifier(host, docs, validator=rejecting_validator).run()
    sketch = host.p5()

    with pytest.raises(ArgumentViolation):
        sketch.background(255)
    assert sketch.log == []


def test_unloaded_optional_class_is_skipped(host, docs, caplog):
    with caplog.at_level(logging.DEBUG, logger="proxify.proxifier"):
        Proxifier(host, docs).run()

    assert not hasattr(host, "SoundFile")
    assert "Skipping p5.SoundFile" in caplog.text
    assert not [r for r in caplog.records if r.levelno >= logging.WARNING]


def test_non_class_namespace_entry_is_skipped(host, docs, proxies):
    host.SoundFile = "not loaded"

    Proxifier(host, docs, proxies=proxies).run()

    assert host.SoundFile == "not loaded"
    assert len(proxies) == 3


def test_unrecognized_class_names_are_reported(host, docs_data, caplog):
    docs_data["classes"]["Other.Thing"] = {}
    docs_data["classes"]["p5.Deeply.Nested"] = {}
    docs = ClassRegistry.from_dict(docs_data)

    with caplog.at_level(logging.WARNING, logger="proxify.proxifier"):
        Proxifier(host, docs).run()

    messages = [r.getMessage() for r in caplog.records]
    assert "Unrecognized class: Other.Thing" in messages
    assert "Unrecognized class: p5.Deeply.Nested" in messages


def test_run_twice_conflicts(host, docs):
    proxifier = Proxifier(host, docs)
    proxifier.run()

    with pytest.raises(ConstructionConflict):
        proxifier.run()


def test_second_pass_over_proxied_namespace_conflicts(host, docs):
    Proxifier(host, docs).run()

    with pytest.raises(ConstructionConflict):
        Proxifier(host, docs).run()


def test_chain_repair_runs_after_direct_proxying(host, docs_data):
    # Renderer2D has no documentation of its own
    docs_data["classes"] = {"p5.Renderer": {}, "p5": {}}
    docs = ClassRegistry.from_dict(docs_data)

    Proxifier(host, docs).run()

    assert isinstance(host.Renderer2D(), host.Renderer)


def test_help_is_available_on_intercepted_methods(host, docs):
    Proxifier(host, docs).run()

    method = host.Vector.add
    assert isinstance(method, InterceptedMethod)
    assert method._help_text is None
    assert method.help.startswith("add()\n\nAdds x and y components to a vector.")
    assert method.help.endswith("http://p5js.org/reference/#/p5.Vector/add")


# -------------------------------------------------------------------
# Default validator
# -------------------------------------------------------------------


def test_default_validator_checks_documented_types(host, docs):
    Proxifier(host, docs).run()
    v = host.Vector(1, 1)

    with pytest.raises(ArgumentViolation, match="Number or p5.Vector"):
        v.add("one")
    with pytest.raises(ArgumentViolation, match="at least 1"):
        v.add()

    v.add(host.Vector(2, 2))
    assert (v.x, v.y) == (3, 3)


def test_default_validator_resolves_root_and_missing_classes(host, docs):
    proxifier = Proxifier(host, docs)
    proxifier.run()

    assert proxifier.resolve_class("p5") is host.p5
    assert proxifier.resolve_class("p5.Vector") is host.Vector
    assert proxifier.resolve_class("p5.SoundFile") is None
    assert proxifier.resolve_class("Other") is None


# -------------------------------------------------------------------
# Namespaces and settings
# -------------------------------------------------------------------


def test_module_namespace_is_mutated_in_place(host, docs):
    module = ModuleType("sketchlib")
    module.__dict__.update(vars(host))

    Proxifier(module, docs).run()

    assert isinstance(module.Vector, ProxyMeta)
    assert isinstance(module.Renderer2D(), module.Renderer)


def test_custom_root_name(host, docs_data):
    text = json.dumps(docs_data).replace('"p5', '"Sketch')
    docs = ClassRegistry.from_json(text)
    host.Sketch = host.p5
    del host.p5

    Proxifier(host, docs, settings=ProxifySettings(root_name="Sketch")).run()

    assert isinstance(host.Sketch, ProxyMeta)
    assert isinstance(host.Vector, ProxyMeta)


def test_proxify_convenience_accepts_decoded_docs(host, docs_data):
    proxify(host, docs_data, validate_arguments=False)

    assert isinstance(host.Vector, ProxyMeta)
    sketch = host.p5()
    assert sketch.background("any", "number", "of", "args") is sketch


def test_proxify_convenience_accepts_a_path(host, docs_data, tmp_path):
    path = tmp_path / "data.json"
    path.write_text(json.dumps(docs_data), encoding="utf-8")

    proxify(host, path)

    assert isinstance(host.p5, ProxyMeta)


def test_default_validator_accepts_keyword_calls(host, docs):
    Proxifier(host, docs).run()
    v = host.Vector(1, 1)

    v.add(x=3)
    v.add(1, y=2)
    assert (v.x, v.y) == (5, 3)

    with pytest.raises(ArgumentViolation, match=r"parameter #1 \(y\)"):
        v.add(1, y="not a number")
    assert (v.x, v.y) == (5, 3)


def test_pass_leaves_host_subclass_registries_untouched(host, docs):
    subclasses = []

    class Renderer:
        def __init_subclass__(cls, **kwargs):
            super().__init_subclass__(**kwargs)
            subclasses.append(cls.__name__)

        def resize(self, w, h):
            return (w, h)

    class Renderer2D(Renderer):
        pass

    host.Renderer, host.Renderer2D = Renderer, Renderer2D
    subclasses.clear()

    Proxifier(host, docs).run()

    assert subclasses == []
    assert isinstance(host.Renderer2D(), host.Renderer)
