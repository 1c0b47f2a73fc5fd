from __future__ import annotations

import pytest

from orgtrack.services.errors import ValidationError


def _item(services, org, name, quantity, minimum, cost=2.0):
    return services.inventory.create(
        {
            "name": name,
            "category": "Cabos",
            "quantity": quantity,
            "minQuantity": minimum,
            "location": "Almoxarifado",
            "costPerUnit": cost,
            "organizationId": org["id"],
        }
    )


def test_status_and_label(services, org):
    assert _item(services, org, "HDMI", 10, 3)["statusLabel"] == "Disponível"
    assert _item(services, org, "USB", 3, 3)["statusLabel"] == "Estoque Baixo"
    out = _item(services, org, "VGA", 0, 3)
    assert out["status"] == "out_of_stock"
    assert out["statusLabel"] == "Sem Estoque"


def test_low_stock_includes_out_of_stock(services, org):
    _item(services, org, "HDMI", 10, 3)
    _item(services, org, "USB", 2, 3)
    _item(services, org, "VGA", 0, 3)
    assert [item["name"] for item in services.inventory.get_low_stock(org["id"])] == ["USB", "VGA"]


def test_update_quantity(services, org):
    item = _item(services, org, "HDMI", 10, 3, cost=1.5)
    assert item["totalValue"] == 15.0

    updated = services.inventory.update_quantity(item["id"], 2)
    assert updated["quantity"] == 2
    assert updated["status"] == "low_stock"
    assert services.inventory.update_quantity("missing", 1) is None
    with pytest.raises(ValidationError):
        services.inventory.update_quantity(item["id"], -1)
    assert services.inventory.get_by_id(item["id"])["quantity"] == 2


def test_create_rejects_negative_quantity(services, org):
    with pytest.raises(ValidationError):
        _item(services, org, "HDMI", -5, 3)
    with pytest.raises(ValidationError):
        _item(services, org, "HDMI", 1.5, 3)
