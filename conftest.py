"""Root pytest configuration and fixtures.

This module provides:
- Environment isolation for SCHEMAFLOW_* variables
- Shared schema dictionaries used across package tests
"""

from __future__ import annotations

import os

import pytest

from schemaflow.config import EnvVar
from schemaflow.loader import load_examples
from schemaflow.schema import SchemaValue, s

# =============================================================================
# Environment
# =============================================================================


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SCHEMAFLOW_* variables so tests see the defaults."""
    for var in EnvVar:
        if var.value.name in os.environ:
            monkeypatch.delenv(var.value.name)


# =============================================================================
# Schema Fixtures
# =============================================================================


@pytest.fixture
def user_role_dictionary() -> dict[str, SchemaValue]:
    """A user object referencing a registered role enum.

    Returns:
        ``{"User": {role: Role, name: string}, "Role": enum[admin, user]}``.
    """
    role = s.enum(["admin", "user"])
    user = s.object({"role": role, "name": s.string()})
    return {"User": user, "Role": role}


@pytest.fixture
def order_product_dictionary() -> dict[str, SchemaValue]:
    """An order holding an array of registered products."""
    product = s.object({"id": s.string()})
    order = s.object({"items": s.array(product)})
    return {"Order": order, "Product": product}


@pytest.fixture
def example_dictionary() -> dict[str, SchemaValue]:
    """The bundled example schemas."""
    return load_examples()
