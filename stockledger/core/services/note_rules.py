"""
Free-text note classification.

The upstream ledger carries no structured flag for claim returns or factory
use, so those quantities are picked out by substring match on the note. The
rules are a plain tagged list so they can be swapped without touching the
aggregation engine.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from stockledger.config import get_settings
from stockledger.core.entities.inventory import Transaction, TransactionType

CLAIM_TAG = "claim"
FACTORY_TAG = "factory"


@dataclass(frozen=True)
class NoteRule:
    """Tag applied when any keyword occurs in a transaction note."""

    tag: str
    keywords: tuple[str, ...]

    def matches(self, note: str | None) -> bool:
        if not note:
            return False
        return any(keyword in note for keyword in self.keywords)


class NoteClassifier:
    """Applies an ordered rule list to ``out`` transactions."""

    def __init__(self, rules: Sequence[NoteRule]):
        self._rules = tuple(rules)

    @property
    def tags(self) -> list[str]:
        return [rule.tag for rule in self._rules]

    def tags_for(self, txn: Transaction) -> list[str]:
        """Every tag whose rule matches; only ``out`` entries are considered."""
        if txn.type != TransactionType.OUT:
            return []
        return [rule.tag for rule in self._rules if rule.matches(txn.note)]

    def tagged_quantities(self, transactions: Iterable[Transaction]) -> dict[str, int]:
        """Quantity per tag. A transaction may count under several tags."""
        totals = {tag: 0 for tag in self.tags}
        for txn in transactions:
            for tag in self.tags_for(txn):
                totals[tag] += txn.quantity
        return totals


def default_note_rules() -> list[NoteRule]:
    settings = get_settings().reconcile
    return [
        NoteRule(tag=CLAIM_TAG, keywords=tuple(settings.claim_keywords)),
        NoteRule(tag=FACTORY_TAG, keywords=tuple(settings.factory_keywords)),
    ]


def default_note_classifier() -> NoteClassifier:
    return NoteClassifier(default_note_rules())
