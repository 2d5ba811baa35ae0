"""Adjust Stock Use Case: one stock movement plus its ledger entry, then persist."""

from dataclasses import dataclass

from stockledger.application.dto.requests import AdjustStockRequest
from stockledger.application.dto.responses import (
    AdjustStockResponse,
    StockResponse,
    TransactionResponse,
)
from stockledger.config import get_logger
from stockledger.core.entities.inventory import Product, Transaction
from stockledger.core.exceptions import StorageError
from stockledger.core.interfaces.ledger_persistence import ILedgerPersistence
from stockledger.core.services.ledger_store import LedgerStore

logger = get_logger(__name__)


@dataclass
class AdjustStockResult:
    """Result of a stock adjustment."""

    product_id: str
    quantity: int
    transaction: Transaction
    product: Product | None = None


class AdjustStockUseCase:
    """Apply an adjustment to the store and write the new snapshot."""

    def __init__(
        self,
        store: LedgerStore | None = None,
        persistence: ILedgerPersistence | None = None,
    ):
        self._store = store
        self._persistence = persistence

    def _get_store(self) -> LedgerStore:
        if self._store is None:
            from stockledger.application.services import get_ledger_store

            self._store = get_ledger_store()
        return self._store

    def _get_persistence(self) -> ILedgerPersistence:
        if self._persistence is None:
            from stockledger.application.services import get_ledger_persistence

            self._persistence = get_ledger_persistence()
        return self._persistence

    async def execute(self, product_id: str, request: AdjustStockRequest) -> AdjustStockResult:
        """Execute adjust stock use case."""
        store = self._get_store()
        product = store.get_product(product_id)
        if product is None:
            # Unknown ids are tolerated; the entry shows up as an orphan in reports
            logger.warning("adjust_unknown_product", product_id=product_id)

        previous = store.snapshot()
        txn = store.adjust_stock(
            product_id,
            request.quantity,
            request.direction,
            sub_type=request.sub_type,
            customer_id=request.customer_id,
            operator=request.operator,
            note=request.note,
            date=request.date,
        )

        try:
            await self._get_persistence().save(store.snapshot())
        except StorageError:
            # Nothing was persisted, so the in-memory change is undone too
            store.restore(previous)
            logger.warning("adjust_rolled_back", product_id=product_id, transaction_id=txn.id)
            raise

        return AdjustStockResult(
            product_id=product_id,
            quantity=store.get_stock(product_id),
            transaction=txn,
            product=product,
        )

    def to_response(self, result: AdjustStockResult) -> AdjustStockResponse:
        """Convert result to API response."""
        unit_price = result.product.unit_price if result.product else 0.0
        txn = result.transaction
        return AdjustStockResponse(
            stock=StockResponse(
                product_id=result.product_id,
                quantity=result.quantity,
                unit_price=unit_price,
                value=result.quantity * unit_price,
                known_product=result.product is not None,
            ),
            transaction=TransactionResponse(
                id=txn.id,
                product_id=txn.product_id,
                type=txn.type.value,
                sub_type=txn.sub_type.value if txn.sub_type else None,
                quantity=txn.quantity,
                date=txn.date,
                customer_id=txn.customer_id,
                operator=txn.operator,
                note=txn.note,
            ),
        )
