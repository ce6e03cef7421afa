# tests/test_permission_helpers.py

"""
Tests for the role editor helpers (backend role records <-> CRUD matrix).
"""

from core.permission_helpers import (
    build_category_modules,
    build_permission_id_map,
    build_permission_state,
    count_permissions,
    humanize_module,
    module_of,
    select_all_for_module,
    to_permission_ids,
    to_permission_names,
    toggle_all_in_category,
    toggle_permission,
)
from models.enums import Operation
from models.permission import ApiPermission, ApiRole, ModulePermissions


def _role(granted, role_id=1, name="manager"):
    catalog = [
        ApiPermission(id=1, name="sales.view", category="Operations"),
        ApiPermission(id=2, name="sales.create", category="Operations"),
        ApiPermission(id=3, name="sales.update", category="Operations"),
        ApiPermission(id=4, name="sales.delete", category="Operations"),
        ApiPermission(id=5, name="purchase.view", category="Operations"),
        ApiPermission(id=6, name="purchase.create", category="Operations"),
        ApiPermission(id=9, name="inventory_raw.view", category="Inventory"),
    ]
    return ApiRole(
        id=role_id,
        name=name,
        permissions=[p for p in catalog if p.name in granted],
        permissions_by_category={
            "Operations": [p for p in catalog if p.category == "Operations"],
            "Inventory": [p for p in catalog if p.category == "Inventory"],
        },
    )


def test_module_of():
    assert module_of("inventory_raw.view") == "inventory_raw"
    assert module_of("a.b.create") == "a.b"
    assert module_of("plain") == "plain"


def test_build_permission_state_covers_every_known_module():
    state = build_permission_state(_role({"sales.view", "sales.create"}))

    assert set(state) == {"sales", "purchase", "inventory_raw"}
    assert state["sales"] == ModulePermissions(view=True, create=True)
    assert state["purchase"] == ModulePermissions()


def test_build_category_modules_and_id_map():
    role = _role(set())
    assert build_category_modules([role]) == {
        "Operations": ["sales", "purchase"],
        "Inventory": ["inventory_raw"],
    }
    id_map = build_permission_id_map([role])
    assert id_map["sales.delete"] == 4
    assert id_map["inventory_raw.view"] == 9


def test_toggle_permission_keeps_view_implication():
    matrix = {"sales": ModulePermissions()}

    matrix = toggle_permission(matrix, "sales", Operation.update)
    assert matrix["sales"] == ModulePermissions(view=True, update=True)

    matrix = toggle_permission(matrix, "sales", Operation.view)
    assert matrix["sales"] == ModulePermissions()


def test_toggle_permission_does_not_mutate_input():
    original = {"sales": ModulePermissions()}
    toggle_permission(original, "sales", Operation.create)
    assert original["sales"] == ModulePermissions()


def test_toggle_all_in_category():
    matrix = {
        "sales": ModulePermissions(view=True),
        "purchase": ModulePermissions(),
    }

    matrix = toggle_all_in_category(matrix, ["sales", "purchase"], Operation.create)
    assert matrix["sales"].create and matrix["purchase"].create
    assert matrix["purchase"].view

    # every module already has create: the column is cleared
    matrix = toggle_all_in_category(matrix, ["sales", "purchase"], Operation.create)
    assert not matrix["sales"].create and not matrix["purchase"].create
    assert matrix["sales"].view


def test_select_all_for_module():
    matrix = select_all_for_module({}, "sales")
    assert matrix["sales"].is_full

    matrix = select_all_for_module(matrix, "sales")
    assert matrix["sales"] == ModulePermissions()


def test_to_permission_ids_drops_unknown_names():
    matrix = {
        "sales": ModulePermissions(create=True),
        "unknown_module": ModulePermissions(view=True),
    }
    id_map = build_permission_id_map([_role(set())])

    assert to_permission_names(matrix) == ["sales.view", "sales.create", "unknown_module.view"]
    assert to_permission_ids(matrix, id_map) == [1, 2]
    assert count_permissions(matrix) == 3


def test_humanize_module():
    assert humanize_module("inventory_raw") == "Inventory Raw"
    assert humanize_module("sales") == "Sales"
