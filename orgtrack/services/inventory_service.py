"""Inventory stock items."""

from __future__ import annotations

from typing import Optional

from orgtrack.core.logging_factory import get_logger
from orgtrack.core.utils import now_iso
from orgtrack.domain.statuses import STOCK_LOW, STOCK_OUT
from orgtrack.services.base import CollectionService, find_index
from orgtrack.services.errors import ValidationError
from orgtrack.services.record_mapper import compose_inventory_item

logger = get_logger(__name__)


class InventoryService(CollectionService):
    collection = "inventory"
    required_fields = ("name", "category", "quantity", "minQuantity", "location", "organizationId")
    writable_fields = frozenset(
        {"name", "category", "quantity", "minQuantity", "location", "costPerUnit", "supplier", "organizationId"}
    )
    updatable_fields = writable_fields - {"organizationId"}

    def _compose(self, row: dict, context: dict) -> dict:
        return compose_inventory_item(row)

    def _prepare(self, row: dict, original: Optional[dict]) -> None:
        if row.get("cost_per_unit") is None:
            row["cost_per_unit"] = 0.0

    def _validate(self, row: dict, original: Optional[dict]) -> None:
        super()._validate(row, original)
        self._check_non_negative(row, "quantity", "Quantidade", integer=True)
        self._check_non_negative(row, "min_quantity", "Quantidade minima", integer=True)
        self._check_non_negative(row, "cost_per_unit", "Custo por unidade")

    def get_low_stock(self, organization_id: str) -> list[dict]:
        """Items at or below their minimum, out-of-stock included."""
        return [item for item in self.get_all(organization_id) if item["status"] in (STOCK_LOW, STOCK_OUT)]

    def update_quantity(self, item_id: str, quantity: int) -> Optional[dict]:
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 0:
            raise ValidationError("Quantidade deve ser um inteiro nao negativo")
        rows = self._rows()
        index = find_index(rows, item_id)
        if index < 0:
            return None
        item = rows[index]
        previous = item.get("quantity")
        item["quantity"] = quantity
        item["updated_at"] = now_iso(self._now())
        self._save(rows)
        logger.info("inventory %s quantity %s -> %d", item_id, previous, quantity)
        return compose_inventory_item(item)
