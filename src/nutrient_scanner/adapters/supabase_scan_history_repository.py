"""Supabase-backed scan history."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from nutrient_scanner.domain.products import ScannedItem
from nutrient_scanner.domain.scoring import Rating
from nutrient_scanner.services.scans import ScanHistoryRepository

_TABLE = "scan_history"


@dataclass
class SupabaseScanHistoryRepository(ScanHistoryRepository):
    """Stores scan history rows in the ``scan_history`` table."""

    client: Client

    def add_item(self, item: ScannedItem) -> None:
        """Insert a history row."""
        response = (
            self.client.table(_TABLE)
            .insert(
                {
                    "barcode": item.barcode,
                    "name": item.name,
                    "brand": item.brand,
                    "score": item.score,
                    "rating": item.rating.value,
                    "scanned_at": item.scanned_at.isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store scan history item")

    def list_items(self, limit: int) -> list[ScannedItem]:
        """Return up to limit items, most recent first."""
        response = (
            self.client.table(_TABLE)
            .select("barcode, name, brand, score, rating, scanned_at")
            .order("scanned_at", desc=True)
            .limit(limit)
            .execute()
        )
        return [_parse_item(row) for row in response.data or []]

    def clear(self) -> None:
        """Delete every history row."""
        self.client.table(_TABLE).delete().neq("barcode", "").execute()


def _parse_item(row: dict[str, object]) -> ScannedItem:
    return ScannedItem(
        barcode=str(row["barcode"]),
        name=str(row["name"]),
        brand=row.get("brand"),  # type: ignore[arg-type]
        score=int(row["score"]),  # type: ignore[arg-type]
        rating=Rating(row["rating"]),
        scanned_at=datetime.fromisoformat(str(row["scanned_at"])),
    )
