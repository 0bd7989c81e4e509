"""
Tests for the merge engine and field registry (core/merge.py).
"""
import logging

import pytest

from core.merge import FieldRegistry, compute_merged, merge_field, registered_fields
from core.models import FieldDefinition


class TestMergeField:
    def test_override_sets_attributes(self):
        merged = merge_field(FieldDefinition(name="email", type="email"), {"description": "Recipient"})
        assert merged == FieldDefinition(name="email", type="email", description="Recipient")

    def test_none_does_not_clobber(self):
        merged = merge_field(FieldDefinition(name="email", type="email"), {"type": None})
        assert merged.type == "email"

    def test_name_is_never_changed(self):
        assert merge_field(FieldDefinition(name="email"), {"name": "other"}).name == "email"

    def test_lists_are_replaced_wholesale(self):
        base = FieldDefinition(name="p", enum_values=["a", "b", "c"])
        assert merge_field(base, {"enum_values": ["z"]}).enum_values == ["z"]

    def test_base_is_not_mutated(self):
        base = FieldDefinition(name="email")
        merge_field(base, {"description": "Recipient"})
        assert base.description is None

    def test_unknown_keys_are_ignored_with_warning(self, caplog):
        caplog.set_level(logging.WARNING)
        merged = merge_field(FieldDefinition(name="email"), {"placeholder": "you@example.com"})
        assert merged == FieldDefinition(name="email")
        assert "placeholder" in caplog.text
        assert "[toolform]" in caplog.text


class TestComputeMerged:
    def test_override_refines_tree_field(self):
        merged = compute_merged(
            [FieldDefinition(name="email", type="email")],
            {"email": {"type": "string", "description": "Recipient"}},
        )
        assert merged["email"] == FieldDefinition(name="email", type="string", description="Recipient")

    def test_registered_field_wins(self):
        merged = compute_merged(
            [FieldDefinition(name="email", type="email")],
            {"email": {"description": "Recipient"}},
            [FieldDefinition(name="email", description="Context override")],
        )
        assert merged["email"].description == "Context override"
        assert merged["email"].type == "email"

    def test_registered_none_keeps_lower_priority_value(self):
        merged = compute_merged(
            [],
            {"email": {"description": "Recipient"}},
            {"email": FieldDefinition(name="email", required=True)},
        )
        assert merged["email"] == FieldDefinition(name="email", required=True, description="Recipient")

    def test_override_for_unknown_name_synthesizes_field(self):
        merged = compute_merged([], {"notes": {"type": "text"}})
        assert merged == {"notes": FieldDefinition(name="notes", type="text")}

    def test_repeated_tree_name_keeps_last(self):
        merged = compute_merged([FieldDefinition(name="x", type="text"), FieldDefinition(name="x", type="number")])
        assert merged["x"].type == "number"

    def test_one_of_override_leaves_enum_values(self):
        merged = compute_merged(
            [FieldDefinition(name="p", enum_values=["a"], one_of=[{"value": "a", "label": "A"}])],
            {"p": {"one_of": [{"value": "b", "label": "B"}]}},
        )
        assert merged["p"].enum_values == ["a"]

    def test_empty_inputs(self):
        assert compute_merged([]) == {}

    def test_result_is_independent_of_source_order(self):
        registered = [FieldDefinition(name="a", title="A"), FieldDefinition(name="b", title="B")]
        assert compute_merged([], None, registered) == compute_merged([], None, list(reversed(registered)))


class TestFieldRegistry:
    def test_register_replaces_by_name(self):
        registry = FieldRegistry()
        registry.register(FieldDefinition(name="email", title="First"))
        registry.register(FieldDefinition(name="email", title="Second"))
        assert len(registry) == 1
        assert registry.get("email").title == "Second"

    def test_unregister_unknown_is_noop(self):
        registry = FieldRegistry()
        registry.unregister("missing")
        assert registry.version == 0

    def test_fields_are_sorted(self):
        registry = FieldRegistry()
        registry.register(FieldDefinition(name="zebra"))
        registry.register(FieldDefinition(name="apple"))
        assert [f.name for f in registry.fields()] == ["apple", "zebra"]

    def test_version_tracks_changes(self):
        registry = FieldRegistry()
        registry.register(FieldDefinition(name="a"))
        registry.unregister("a")
        registry.clear()
        assert registry.version == 2
        assert "a" not in registry


class TestRegisteredFields:
    def test_fields_are_removed_on_exit(self):
        registry = FieldRegistry()
        with registered_fields(registry, FieldDefinition(name="email"), FieldDefinition(name="age")):
            assert "email" in registry and "age" in registry
        assert len(registry) == 0

    def test_fields_are_removed_on_error(self):
        registry = FieldRegistry()
        with pytest.raises(RuntimeError):
            with registered_fields(registry, FieldDefinition(name="email")):
                raise RuntimeError("boom")
        assert "email" not in registry

    def test_without_registry_warns_and_runs(self, caplog):
        caplog.set_level(logging.WARNING)
        ran = False
        with registered_fields(None, FieldDefinition(name="email")):
            ran = True
        assert ran
        assert "email" in caplog.text

    def test_without_registry_is_quiet_in_production(self, caplog, monkeypatch):
        monkeypatch.setenv("TOOLFORM_ENV", "production")
        caplog.set_level(logging.WARNING)
        with registered_fields(None, FieldDefinition(name="email")):
            pass
        assert caplog.records == []
