"""Domain layer for accountshelper.

Services are imported lazily so the entity and taxonomy modules can be
imported by the database layer without a cycle.
"""

_SERVICES = {
    "TransactionService": "accountshelper.domain.transaction",
    "CategoryMatcher": "accountshelper.domain.category_matcher",
    "ReconciliationService": "accountshelper.domain.reconciliation",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
