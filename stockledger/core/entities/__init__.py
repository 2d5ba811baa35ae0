"""Core domain entities."""

from stockledger.core.entities.forecast import (
    ConfidenceLevel,
    DemandForecastResult,
    HighlightType,
    InventoryReport,
    ReportHighlight,
    TopUsedProduct,
)
from stockledger.core.entities.inventory import (
    Customer,
    Product,
    Stock,
    Supplier,
    Transaction,
    TransactionSubType,
    TransactionType,
)
from stockledger.core.entities.summary import (
    BucketQuantities,
    CustomerUsage,
    CustomerUsageSummary,
    DailyReceiptSummary,
    LineItem,
    ProductSummaryRow,
    ShortageItem,
    SupplierMonthlySummary,
    SupplierSummaryRow,
    SupplierTotals,
)

__all__ = [
    # Inventory entities
    "Supplier",
    "Product",
    "Stock",
    "Customer",
    "Transaction",
    "TransactionType",
    "TransactionSubType",
    # Summary entities
    "BucketQuantities",
    "CustomerUsage",
    "ProductSummaryRow",
    "SupplierTotals",
    "SupplierSummaryRow",
    "SupplierMonthlySummary",
    "ShortageItem",
    "LineItem",
    "DailyReceiptSummary",
    "CustomerUsageSummary",
    # AI entities
    "ConfidenceLevel",
    "DemandForecastResult",
    "HighlightType",
    "ReportHighlight",
    "TopUsedProduct",
    "InventoryReport",
]
