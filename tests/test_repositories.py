"""Tests for the Supabase repositories (client mocked)."""

from unittest.mock import MagicMock

import pytest

from jotam.database import (
    ContentRepository,
    LocationHistoryRepository,
    NeighborhoodRepository,
    SupabaseClient,
)
from jotam.filters import ScopeFilter
from jotam.models import LocationHistoryEntry


@pytest.fixture
def query():
    """Query builder fluido: cada método devuelve el mismo mock."""
    builder = MagicMock()
    for method in ("select", "insert", "eq", "ilike", "order", "limit"):
        getattr(builder, method).return_value = builder
    builder.execute.return_value = MagicMock(data=[{"id": "row-1"}])
    return builder


@pytest.fixture
def supabase(query):
    client = MagicMock(spec=SupabaseClient)
    client.table.return_value = query
    return client


class TestSupabaseClient:
    def test_current_user_id(self):
        raw = MagicMock()
        raw.auth.get_session.return_value = MagicMock(user=MagicMock(id="user-1"))

        assert SupabaseClient(raw).current_user_id() == "user-1"

    def test_current_user_id_without_session(self):
        raw = MagicMock()
        raw.auth.get_session.return_value = None

        assert SupabaseClient(raw).current_user_id() is None


class TestLocationHistoryRepository:
    def test_create(self, supabase, query, sao_paulo):
        repo = LocationHistoryRepository(supabase)
        entry = LocationHistoryEntry.from_location("user-1", sao_paulo)

        result = repo.create(entry)

        supabase.table.assert_called_with("location_history")
        query.insert.assert_called_once_with(entry.to_db_dict())
        assert result == {"id": "row-1"}

    def test_get_user_history(self, supabase, query):
        repo = LocationHistoryRepository(supabase)

        repo.get_user_history("user-1", limit=5)

        query.eq.assert_called_once_with("user_id", "user-1")
        query.order.assert_called_once_with("created_at", desc=True)
        query.limit.assert_called_once_with(5)


class TestNeighborhoodRepository:
    def test_list_active_for_city(self, supabase, query):
        repo = NeighborhoodRepository(supabase)

        repo.list_active("São Paulo")

        supabase.table.assert_called_with("neighborhoods")
        assert [c.args for c in query.eq.call_args_list] == [
            ("is_active", True),
            ("city", "São Paulo"),
        ]


class TestContentRepository:
    def test_search_in_scope(self, supabase, query, sao_paulo):
        repo = ContentRepository(supabase)
        scope_filter = ScopeFilter(city="São Paulo", neighborhood="Bela Vista")

        rows = repo.search_in_scope("products", scope_filter, text=" pão ", limit=10)

        supabase.table.assert_called_with("products")
        assert [c.args for c in query.eq.call_args_list] == [
            ("city", "São Paulo"),
            ("neighborhood", "Bela Vista"),
        ]
        query.ilike.assert_called_once_with("name", "%pão%")
        query.limit.assert_called_once_with(10)
        assert rows == [{"id": "row-1"}]

    def test_search_without_text(self, supabase, query):
        repo = ContentRepository(supabase)

        repo.search_in_scope("sellers", ScopeFilter())

        query.eq.assert_not_called()
        query.ilike.assert_not_called()
