"""Background workers for the debt ledger service"""
from .debt_tab_reconciler import DebtTabReconcilerWorker

__all__ = ["DebtTabReconcilerWorker"]
