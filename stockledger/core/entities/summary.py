"""Monthly rollup and reconciliation rows."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from stockledger.core.entities.inventory import Product


class BucketQuantities(BaseModel):
    """Quantities for one week or one day of a month."""

    label: str
    first_day: date
    last_day: date
    purchases: int = 0
    stock_in: int = 0
    usage: int = 0
    subtotal: int = 0


class CustomerUsage(BaseModel):
    """Usage booked against one customer for one product."""

    customer_id: str
    quantity: int = 0
    amount: float = 0.0


class ProductSummaryRow(BaseModel):
    """Per-product monthly rollup with the physical-vs-ledger drift."""

    product_id: str
    product_name: str
    supplier_id: str
    supplier_name: str
    year_month: str
    unit_price: float
    min_stock: int

    prev_month_stock: int  # previous month's flow only, not cumulative
    current_stock: int  # live physical count
    weekly: list[BucketQuantities] = Field(default_factory=list)
    daily: list[BucketQuantities] = Field(default_factory=list)

    total_purchases: int = 0
    total_stock_in: int = 0
    total_usage: int = 0
    customer_usage: list[CustomerUsage] = Field(default_factory=list)

    claim_qty: int = 0
    claim_amount: float = 0.0
    factory_qty: int = 0
    factory_amount: float = 0.0
    tagged_quantities: dict[str, int] = Field(default_factory=dict)

    this_month_balance: int = 0
    diff: int = 0  # current_stock - this_month_balance
    shortage: int = 0
    order_amount: float = 0.0

    inventory_value: float = 0.0
    prev_inventory_value: float = 0.0
    purchase_amount: float = 0.0
    purchase_amount_with_tax: float = 0.0
    usage_amount: float = 0.0


class SupplierTotals(BaseModel):
    """Currency figures shared by supplier rows and the grand total."""

    previous_balance: float = 0.0
    monthly_purchase: float = 0.0
    monthly_usage: float = 0.0
    stock_in_purchase: float = 0.0
    change: float = 0.0
    calculated_balance: float = 0.0
    display_stock: float = 0.0
    display_stock_qty: int = 0
    actual_stock: float = 0.0

    def __add__(self, other: "SupplierTotals") -> "SupplierTotals":
        return SupplierTotals(
            **{
                name: getattr(self, name) + getattr(other, name)
                for name in SupplierTotals.model_fields
            }
        )


class SupplierSummaryRow(SupplierTotals):
    """Per-supplier monthly ledger balance."""

    supplier_id: str
    supplier_name: str
    year_month: str
    product_count: int = 0

    def totals(self) -> SupplierTotals:
        return SupplierTotals(
            **{name: getattr(self, name) for name in SupplierTotals.model_fields}
        )


class SupplierMonthlySummary(BaseModel):
    """Supplier rows plus their field-wise grand total."""

    year_month: str
    rows: list[SupplierSummaryRow] = Field(default_factory=list)
    totals: SupplierTotals = Field(default_factory=SupplierTotals)


class ShortageItem(BaseModel):
    """Product below its reorder threshold."""

    product: Product
    current_stock: int
    shortage: int
    supplier_name: str
    order_amount: float = 0.0


class LineItem(BaseModel):
    """Priced line inside a receipt or usage summary."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    amount: float
    date: datetime | None = None


class DailyReceiptSummary(BaseModel):
    """Goods received from one supplier on one day."""

    date: date
    supplier_id: str
    supplier_name: str
    total_quantity: int = 0
    total_amount: float = 0.0
    items: list[LineItem] = Field(default_factory=list)


class CustomerUsageSummary(BaseModel):
    """Usage booked against one customer over a month."""

    customer_id: str
    customer_name: str
    year_month: str
    total_amount: float = 0.0
    items: list[LineItem] = Field(default_factory=list)
