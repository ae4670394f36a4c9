"""Repository interface and in-memory store for portfolio records."""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from typing import Any, Protocol, TypeVar

from portfolio_tracker.types import Asset, FundamentalMetrics, ManualAssetValue, Transaction

RecordT = TypeVar("RecordT", Asset, Transaction, ManualAssetValue, FundamentalMetrics)


class PortfolioRepository(Protocol):
    """Keyed CRUD capability consumed by the portfolio service."""

    def list_assets(self) -> list[Asset]: ...

    def get_asset(self, asset_id: int) -> Asset | None: ...

    def create_asset(self, asset: Asset) -> Asset: ...

    def update_asset(self, asset_id: int, changes: dict[str, Any]) -> Asset | None: ...

    def delete_asset(self, asset_id: int) -> bool: ...

    def list_transactions(self) -> list[Transaction]: ...

    def transactions_for_asset(self, asset_id: int) -> list[Transaction]: ...

    def create_transaction(self, transaction: Transaction) -> Transaction: ...

    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> Transaction | None: ...

    def delete_transaction(self, transaction_id: int) -> bool: ...

    def list_manual_values(self) -> list[ManualAssetValue]: ...

    def manual_values_for_asset(self, asset_id: int) -> list[ManualAssetValue]: ...

    def create_manual_value(self, value: ManualAssetValue) -> ManualAssetValue: ...

    def update_manual_value(self, value_id: int, changes: dict[str, Any]) -> ManualAssetValue | None: ...

    def fundamentals_for_asset(self, asset_id: int) -> FundamentalMetrics | None: ...

    def save_fundamentals(self, metrics: FundamentalMetrics) -> FundamentalMetrics: ...


@dataclass(slots=True)
class _Table:
    rows: dict[int, Any] = field(default_factory=dict)
    next_id: int = 1

    def insert(self, record: RecordT, explicit_id: int | None = None) -> RecordT:
        if explicit_id is not None and explicit_id in self.rows:
            raise ValueError(f"{type(record).__name__} id {explicit_id} already exists")
        record_id = explicit_id if explicit_id is not None else self.next_id
        self.next_id = max(self.next_id, record_id + 1)
        stored = replace(record, id=record_id)
        self.rows[record_id] = stored
        return stored

    def update(self, record_id: int, changes: dict[str, Any]) -> Any | None:
        current = self.rows.get(record_id)
        if current is None:
            return None
        allowed = {f.name for f in fields(current)} - {"id"}
        unknown = set(changes) - allowed
        if unknown:
            raise ValueError(f"unknown fields for {type(current).__name__}: {sorted(unknown)}")
        updated = replace(current, **changes)
        self.rows[record_id] = updated
        return updated

    def delete(self, record_id: int) -> bool:
        return self.rows.pop(record_id, None) is not None


@dataclass(slots=True)
class InMemoryPortfolioRepository:
    """
    Dictionary-backed repository.

    Each instance owns its tables; ids are assigned on create unless the
    record already carries an unused one. Deleting an asset cascades to its
    transactions, manual values and fundamentals.
    """

    assets: _Table = field(default_factory=_Table)
    transactions: _Table = field(default_factory=_Table)
    manual_values: _Table = field(default_factory=_Table)
    fundamentals: _Table = field(default_factory=_Table)

    def list_assets(self) -> list[Asset]:
        return list(self.assets.rows.values())

    def get_asset(self, asset_id: int) -> Asset | None:
        return self.assets.rows.get(asset_id)

    def create_asset(self, asset: Asset) -> Asset:
        return self.assets.insert(asset, explicit_id=asset.id)

    def update_asset(self, asset_id: int, changes: dict[str, Any]) -> Asset | None:
        return self.assets.update(asset_id, changes)

    def delete_asset(self, asset_id: int) -> bool:
        if not self.assets.delete(asset_id):
            return False
        for table in (self.transactions, self.manual_values, self.fundamentals):
            for record_id in [rid for rid, row in table.rows.items() if row.asset_id == asset_id]:
                table.delete(record_id)
        return True

    def list_transactions(self) -> list[Transaction]:
        return list(self.transactions.rows.values())

    def transactions_for_asset(self, asset_id: int) -> list[Transaction]:
        return [t for t in self.transactions.rows.values() if t.asset_id == asset_id]

    def create_transaction(self, transaction: Transaction) -> Transaction:
        return self.transactions.insert(transaction, explicit_id=transaction.id)

    def update_transaction(self, transaction_id: int, changes: dict[str, Any]) -> Transaction | None:
        return self.transactions.update(transaction_id, changes)

    def delete_transaction(self, transaction_id: int) -> bool:
        return self.transactions.delete(transaction_id)

    def list_manual_values(self) -> list[ManualAssetValue]:
        return list(self.manual_values.rows.values())

    def manual_values_for_asset(self, asset_id: int) -> list[ManualAssetValue]:
        return [v for v in self.manual_values.rows.values() if v.asset_id == asset_id]

    def create_manual_value(self, value: ManualAssetValue) -> ManualAssetValue:
        return self.manual_values.insert(value, explicit_id=value.id)

    def update_manual_value(self, value_id: int, changes: dict[str, Any]) -> ManualAssetValue | None:
        return self.manual_values.update(value_id, changes)

    def fundamentals_for_asset(self, asset_id: int) -> FundamentalMetrics | None:
        for metrics in self.fundamentals.rows.values():
            if metrics.asset_id == asset_id:
                return metrics
        return None

    def save_fundamentals(self, metrics: FundamentalMetrics) -> FundamentalMetrics:
        """Create or replace the single fundamentals record of an asset."""
        if metrics.asset_id is None:
            raise ValueError("fundamentals must reference an asset")
        existing = self.fundamentals_for_asset(metrics.asset_id)
        if existing is None:
            return self.fundamentals.insert(metrics, explicit_id=metrics.id)
        stored = replace(metrics, id=existing.id)
        self.fundamentals.rows[existing.id] = stored
        return stored
