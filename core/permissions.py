# ============================================
# CENTRALIZED MODULE CATALOG → NAVIGATION RULES
# ============================================
from models.permission import Module, NavigationRule

ALL_MODULES = [

    # =====================================================
    # MAIN
    # =====================================================
    Module(id="dashboard", label="Dashboard", path="/", category="Main"),

    # =====================================================
    # FINANCE
    # =====================================================
    Module(id="accounts", label="Chart of Accounts", path="/accounts", category="Finance"),
    Module(id="payment_voucher", label="Payment Voucher", path="/finance/payment-voucher", category="Finance"),

    # =====================================================
    # CONTACTS / LEDGERS
    # =====================================================
    Module(id="contact_receivable", label="Receivable", path="/contact/receivable", category="Contact"),
    Module(id="contact_vendors", label="Vendors", path="/contact/vendors", category="Contact"),
    Module(id="contact_others", label="Others", path="/contact/others", category="Contact"),

    # =====================================================
    # INVENTORY
    # =====================================================
    Module(id="inventory_overview", label="Inventory Overview", path="/inventory", category="Inventory"),
    Module(id="inventory_raw", label="Raw Inventory", path="/inventory/raw", category="Inventory"),
    Module(id="inventory_design", label="Design Inventory", path="/inventory/design", category="Inventory"),
    Module(id="inventory_katae", label="Katae Product", path="/inventory/katae", category="Inventory"),
    Module(id="inventory_finished", label="Finished Product", path="/inventory/finished", category="Inventory"),

    # =====================================================
    # SETUP
    # =====================================================
    Module(id="setup_units", label="Units", path="/setup/units", category="Setup"),
    Module(id="setup_machines", label="Machines", path="/setup/machines", category="Setup"),
    Module(id="setup_expense", label="Expense Categories", path="/setup/expense-categories", category="Setup"),

    # =====================================================
    # OPERATIONS
    # =====================================================
    Module(id="purchase", label="Purchase", path="/purchase", category="Operations"),
    Module(id="purchase_return", label="Purchase Return", path="/purchase-return", category="Operations"),
    Module(id="sales", label="Sales", path="/sales", category="Operations"),

    # =====================================================
    # PRODUCTION: KATAE / KARAHI
    # =====================================================
    Module(id="katae_issued", label="Issued Katae", path="/katae/issued", category="Katae"),
    Module(id="katae_receive", label="Katae Receive", path="/katae/receive", category="Katae"),
    Module(id="karahi_list", label="Karahi List", path="/karahi/list", category="Karahi"),
    Module(id="karahi_issue_material", label="Karahi Issue Material", path="/karahi/issue-material", category="Karahi"),
    Module(id="karahi_ledger", label="Karahi Ledger", path="/karahi/ledger", category="Karahi"),
    Module(id="karahi_material_opening", label="Karahi Material Opening", path="/karahi/material-opening", category="Karahi"),

    # =====================================================
    # REPORTS
    # =====================================================
    Module(id="report_purchase", label="Purchase Report", path="/reports/purchase", category="Reports"),
    Module(id="report_payment", label="Payment Report", path="/reports/payment", category="Reports"),
    Module(id="report_katae_issue", label="Katae Issue Report", path="/reports/katae/issue", category="Reports"),
    Module(id="report_katae_receive", label="Katae Receive Report", path="/reports/katae/receive", category="Reports"),

    # =====================================================
    # ADMIN
    # =====================================================
    Module(id="settings", label="Settings", path="/settings", category="Admin"),
    Module(id="role_management", label="Role Management", path="/settings/roles", category="Admin"),
    Module(id="security", label="Security", path="/settings/security", category="Admin"),
]

MODULES_BY_ID = {module.id: module for module in ALL_MODULES}


def build_navigation_rules(modules=None, public_paths=None) -> list[NavigationRule]:
    """
    One rule per module path plus one public rule per public path.
    The root path only matches itself; every other path also covers
    its sub-routes (/inventory/raw/42 → inventory_raw).
    First module wins when two modules share a path.
    """
    rules: dict[str, NavigationRule] = {}

    for path in public_paths or []:
        rules[path] = NavigationRule(path=path, public=True)

    for module in modules if modules is not None else ALL_MODULES:
        if module.path in rules:
            continue
        rules[module.path] = NavigationRule(
            path=module.path,
            resource_id=module.id,
            exact=module.path == "/",
        )

    return list(rules.values())

