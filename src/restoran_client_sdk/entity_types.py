from __future__ import annotations

from .models_records import DomainRecord, StockEntry

STOCK_ENTRY = "stock_entry"
STOCK_SNAPSHOT = "stock_snapshot"
CENTER_SHIPMENT = "center_shipment"
SHIPMENT = "shipment"
WASTE_ENTRY = "waste_entry"
EXPENSE = "expense"
CASH_MOVEMENT = "cash_movement"
PRODUCE_PURCHASE = "produce_purchase"
PRODUCE_PAYMENT = "produce_payment"

ENTITY_COLLECTIONS: dict[str, str] = {
    STOCK_ENTRY: "/stock-entries",
    STOCK_SNAPSHOT: "/stock-snapshots",
    CENTER_SHIPMENT: "/center-shipments",
    SHIPMENT: "/shipments",
    WASTE_ENTRY: "/waste-entries",
    EXPENSE: "/expenses",
    CASH_MOVEMENT: "/cash-movements",
    PRODUCE_PURCHASE: "/produce-purchases",
    PRODUCE_PAYMENT: "/produce-payments",
}

RECORD_MODELS: dict[str, type[DomainRecord]] = {
    STOCK_ENTRY: StockEntry,
}


def collection_path(entity_type: str) -> str:
    try:
        return ENTITY_COLLECTIONS[entity_type]
    except KeyError:
        raise ValueError(f"Unknown entity type: {entity_type!r}") from None


def record_model(entity_type: str) -> type[DomainRecord]:
    return RECORD_MODELS.get(entity_type, DomainRecord)
