import pytest
from datetime import date, datetime
from unittest.mock import MagicMock

from boutique.checkout.errors import OrderNotFoundError
from boutique.orders import repository
from boutique.orders.models import Order, OrderLine, Shipment

ROW = {
    "order_id": 10248,
    "customer_id": "ALFKI",
    "employee_id": 1,
    "order_date": "2030-01-01T12:00:00",
    "required_date": "2030-01-08T12:00:00",
    "shipped_date": "2030-01-04T12:00:00",
    "ship_via": 3,
    "freight": "9.55",
    "ship_name": "Alfreds Futterkiste",
    "ship_city": "Berlin",
    "order_details": [
        {"order_id": 10248, "product_id": 1, "product_name": "Chai", "unit_price": 18, "quantity": 2, "discount": 0},
    ],
    "shipments": {"order_id": 10248, "shipment_date": "2030-01-02", "shipper_id": 3, "tracking_number": "FS0001"},
}


def _client_returning(data):
    client = MagicMock()
    res = MagicMock(data=data)
    select = client.table.return_value.select.return_value
    select.eq.return_value.limit.return_value.execute.return_value = res
    select.eq.return_value.order.return_value.execute.return_value = res
    client.table.return_value.insert.return_value.execute.return_value = res
    return client


def test_get_order_by_id_maps_nested_rows(monkeypatch):
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: _client_returning([ROW]))
    order = repository.get_order_by_id(10248)
    assert order.order_id == 10248
    assert order.freight == pytest.approx(9.55)
    assert order.lines[0].line_total == pytest.approx(36.0)
    assert order.total == pytest.approx(45.55)
    assert order.shipment.tracking_number == "FS0001"
    assert order.shipment.shipment_date == date(2030, 1, 2)


def test_get_order_by_id_not_found(monkeypatch):
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: _client_returning([]))
    with pytest.raises(OrderNotFoundError) as exc:
        repository.get_order_by_id(1)
    assert exc.value.order_id == 1


def test_get_order_by_id_storage_fault_is_not_not_found(monkeypatch):
    def _boom():
        raise ConnectionError("down")
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", _boom)
    with pytest.raises(ConnectionError):
        repository.get_order_by_id(1)


def test_get_all_orders_by_customer_id(monkeypatch):
    client = _client_returning([ROW, dict(ROW, order_id=10249, shipments=[])])
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: client)
    orders = repository.get_all_orders_by_customer_id("ALFKI")
    assert [o.order_id for o in orders] == [10248, 10249]
    assert orders[1].shipment is None
    client.table.return_value.select.return_value.eq.return_value.order.assert_called_with("order_date", desc=True)


def test_get_all_orders_empty_on_error(monkeypatch):
    def _boom():
        raise RuntimeError("down")
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", _boom)
    assert repository.get_all_orders_by_customer_id("ALFKI") == []


def _order():
    now = datetime(2030, 1, 1, 12, 0)
    return Order(
        customer_id="ALFKI",
        order_date=now,
        required_date=now,
        ship_via=3,
        freight=9.55,
        lines=[OrderLine(product_id=1, product_name="Chai", unit_price=18, quantity=2)],
        shipment=Shipment(shipment_date=date(2030, 1, 2), shipper_id=3, tracking_number="FS0001"),
    )


def test_create_order_inserts_header_details_and_shipment(monkeypatch):
    client = _client_returning([{"order_id": 77}])
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)

    assert repository.create_order(_order()) == 77

    tables = [c.args[0] for c in client.table.call_args_list]
    assert tables == ["orders", "order_details", "shipments"]
    inserts = [c.args[0] for c in client.table.return_value.insert.call_args_list]
    header, details, shipment = inserts
    assert "lines" not in header and "total" not in header and "order_id" not in header
    assert header["order_date"] == "2030-01-01T12:00:00"
    assert details == [{"product_id": 1, "product_name": "Chai", "unit_price": 18.0, "quantity": 2, "discount": 0.0, "order_id": 77}]
    assert shipment["order_id"] == 77 and shipment["tracking_number"] == "FS0001"


def test_create_order_returns_none_on_error(monkeypatch):
    client = MagicMock()
    client.table.return_value.insert.return_value.execute.side_effect = RuntimeError("insert failed")
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)
    assert repository.create_order(_order()) is None


def test_create_order_payment_stores_masked_number(monkeypatch):
    client = _client_returning([{}])
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)

    ok = repository.create_order_payment(77, 55.051, "4111111111111111", date(2031, 12, 1), "APPROVED")

    assert ok is True
    client.table.assert_called_with("order_payments")
    payload = client.table.return_value.insert.call_args.args[0]
    assert payload["credit_card_number"] == "************1111"
    assert payload["amount"] == 55.05
    assert payload["expiration_date"] == "2031-12-01"
    assert payload["approval_code"] == "APPROVED"


def test_create_order_payment_false_on_error(monkeypatch):
    client = MagicMock()
    client.table.return_value.insert.return_value.execute.side_effect = RuntimeError("insert failed")
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)
    assert repository.create_order_payment(77, 1.0, "4111111111111111", date(2031, 12, 1), "A") is False


class _TableClient:
    """Client Supabase factice: un MagicMock par table, insertions en échec sur demande."""

    def __init__(self, failing_table=None):
        self.tables = {}
        self.failing_table = failing_table

    def table(self, name):
        if name not in self.tables:
            mock = MagicMock()
            mock.insert.return_value.execute.return_value = MagicMock(data=[{"order_id": 77}])
            if name == self.failing_table:
                mock.insert.return_value.execute.side_effect = RuntimeError(f"{name} insert failed")
            self.tables[name] = mock
        return self.tables[name]


@pytest.mark.parametrize("failing_table", ["order_details", "shipments"])
def test_create_order_rolls_back_partial_order(monkeypatch, failing_table):
    client = _TableClient(failing_table=failing_table)
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)

    assert repository.create_order(_order()) is None

    orders = client.tables["orders"]
    orders.delete.assert_called_once_with()
    orders.delete.return_value.eq.assert_called_once_with("order_id", 77)
    orders.delete.return_value.eq.return_value.execute.assert_called_once()
    client.tables["order_details"].delete.return_value.eq.assert_called_once_with("order_id", 77)


def test_create_order_header_failure_has_nothing_to_roll_back(monkeypatch):
    client = _TableClient(failing_table="orders")
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)
    assert repository.create_order(_order()) is None
    client.tables["orders"].delete.assert_not_called()


def test_record_payment_incident(monkeypatch):
    client = _TableClient()
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)

    assert repository.record_payment_incident("APPROVED", 55.051, "ALFKI", "order_not_created") is True

    payload = client.tables["payment_incidents"].insert.call_args.args[0]
    assert payload["approval_code"] == "APPROVED"
    assert payload["amount"] == 55.05
    assert payload["order_id"] is None
    assert payload["reason"] == "order_not_created"


def test_record_payment_incident_false_on_error(monkeypatch):
    client = _TableClient(failing_table="payment_incidents")
    monkeypatch.setattr("boutique.infra.supabase_client.get_service_supabase", lambda: client)
    assert repository.record_payment_incident("APPROVED", 1.0, "ALFKI", "payment_not_recorded", order_id=5) is False
