"""
Pytest configuration for the toolform test suite.

Every test runs in development mode with non-strict defaults unless it
switches the environment itself.
"""
import pytest

from core.models import element


@pytest.fixture(autouse=True)
def development_env(monkeypatch):
    monkeypatch.delenv("TOOLFORM_ENV", raising=False)
    monkeypatch.delenv("TOOLFORM_STRICT", raising=False)


@pytest.fixture
def contact_tree():
    """A small contact form: layout wrappers, two inputs and a select."""
    return element(
        "form", None,
        element("div", None, element("label", None, "Email"), element("input", name="email", type="email", required=True)),
        element("div", None, element("input", name="age", type="number", min=0, max=120)),
        element(
            "select", {"name": "priority"},
            element("option", {"value": "low"}, "Low"),
            element("option", {"value": "high"}, "High"),
        ),
    )
