"""Core business services."""

from stockledger.core.services.demand_forecast import DemandForecastService
from stockledger.core.services.ledger_store import LedgerSnapshot, LedgerStore
from stockledger.core.services.note_rules import NoteClassifier, NoteRule
from stockledger.core.services.reconciliation import ReconciliationReporter, days_until_stockout
from stockledger.core.services.report_generator import InventoryReportService

__all__ = [
    "LedgerStore",
    "LedgerSnapshot",
    "NoteRule",
    "NoteClassifier",
    "ReconciliationReporter",
    "days_until_stockout",
    "DemandForecastService",
    "InventoryReportService",
]
