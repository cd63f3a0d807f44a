"""Tests for the Supabase scan history repository."""

from dataclasses import dataclass, field
from datetime import UTC, datetime

import pytest

from nutrient_scanner.adapters.supabase_scan_history_repository import (
    SupabaseScanHistoryRepository,
)
from nutrient_scanner.domain.products import ScannedItem
from nutrient_scanner.domain.scoring import Rating


@dataclass
class FakeResponse:
    data: list[dict[str, object]] | None


@dataclass
class FakeTable:
    name: str
    response_queue: dict[str, list[list[dict[str, object]]]] = field(
        default_factory=lambda: {"select": [], "insert": [], "delete": []}
    )
    last_payload: object | None = None
    last_filters: list[tuple[str, object]] = field(default_factory=list)
    last_order: tuple[str, bool] | None = None
    last_limit: int | None = None

    def queue(self, action: str, data: list[dict[str, object]]) -> None:
        self.response_queue[action].append(data)

    def select(self, *_args) -> "FakeTable":
        self._action = "select"
        return self

    def insert(self, payload) -> "FakeTable":  # type: ignore[no-untyped-def]
        self._action = "insert"
        self.last_payload = payload
        return self

    def delete(self) -> "FakeTable":
        self._action = "delete"
        return self

    def neq(self, column: str, value) -> "FakeTable":  # type: ignore[no-untyped-def]
        self.last_filters.append((column, value))
        return self

    def order(self, column: str, desc: bool = False) -> "FakeTable":
        self.last_order = (column, desc)
        return self

    def limit(self, count: int) -> "FakeTable":
        self.last_limit = count
        return self

    def execute(self) -> FakeResponse:
        action = getattr(self, "_action", "select")
        queue = self.response_queue.get(action, [])
        data = queue.pop(0) if queue else []
        return FakeResponse(data=data)


@dataclass
class FakeSupabaseClient:
    tables: dict[str, FakeTable] = field(default_factory=dict)

    def table(self, name: str) -> FakeTable:
        if name not in self.tables:
            self.tables[name] = FakeTable(name=name)
        return self.tables[name]


def _item() -> ScannedItem:
    return ScannedItem(
        barcode="1234567890123",
        name="Sample Cereal",
        brand="HealthyBrand",
        score=88,
        rating=Rating.VERY_GOOD,
        scanned_at=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
    )


def test_add_item_inserts_row() -> None:
    client = FakeSupabaseClient()
    table = client.table("scan_history")
    table.queue("insert", [{"barcode": "1234567890123"}])

    SupabaseScanHistoryRepository(client).add_item(_item())

    assert table.last_payload == {
        "barcode": "1234567890123",
        "name": "Sample Cereal",
        "brand": "HealthyBrand",
        "score": 88,
        "rating": "VeryGood",
        "scanned_at": "2024-05-01T12:30:00+00:00",
    }


def test_add_item_raises_when_insert_returns_nothing() -> None:
    client = FakeSupabaseClient()

    with pytest.raises(RuntimeError):
        SupabaseScanHistoryRepository(client).add_item(_item())


def test_list_items_parses_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("scan_history")
    table.queue(
        "select",
        [
            {
                "barcode": "1234567890123",
                "name": "Sample Cereal",
                "brand": None,
                "score": 88,
                "rating": "VeryGood",
                "scanned_at": "2024-05-01T12:30:00+00:00",
            }
        ],
    )

    items = SupabaseScanHistoryRepository(client).list_items(limit=10)

    assert items == [
        ScannedItem(
            barcode="1234567890123",
            name="Sample Cereal",
            brand=None,
            score=88,
            rating=Rating.VERY_GOOD,
            scanned_at=datetime(2024, 5, 1, 12, 30, tzinfo=UTC),
        )
    ]
    assert table.last_order == ("scanned_at", True)
    assert table.last_limit == 10


def test_clear_deletes_all_rows() -> None:
    client = FakeSupabaseClient()
    table = client.table("scan_history")

    SupabaseScanHistoryRepository(client).clear()

    assert table._action == "delete"
    assert table.last_filters == [("barcode", "")]
