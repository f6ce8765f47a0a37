from unittest.mock import MagicMock

import pytest
from boutique.customers.repository import CustomerLookupError, get_customer_by_username


def _client(rows):
    client = MagicMock()
    client.table.return_value.select.return_value.eq.return_value.limit.return_value.execute.return_value = MagicMock(data=rows)
    return client


def test_customer_found(monkeypatch):
    client = _client([{"customer_id": "ALFKI", "username": "client@example.com", "company_name": "Alfreds Futterkiste", "city": "Berlin", "region": None}])
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: client)
    customer = get_customer_by_username("client@example.com")
    assert customer.customer_id == "ALFKI"
    assert customer.city == "Berlin"
    assert customer.region == ""
    client.table.assert_called_with("customers")


def test_customer_missing_or_empty_username(monkeypatch):
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", lambda: _client([]))
    assert get_customer_by_username("nobody@example.com") is None
    assert get_customer_by_username("") is None
    assert get_customer_by_username(None) is None


def test_customer_lookup_error_propagates(monkeypatch):
    def _boom():
        raise ConnectionError("down")
    monkeypatch.setattr("boutique.infra.supabase_client.get_supabase", _boom)
    with pytest.raises(CustomerLookupError):
        get_customer_by_username("client@example.com")
