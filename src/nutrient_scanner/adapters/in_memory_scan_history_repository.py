"""Process-local scan history."""

from dataclasses import dataclass, field

from nutrient_scanner.domain.products import ScannedItem
from nutrient_scanner.services.scans import ScanHistoryRepository


@dataclass
class InMemoryScanHistoryRepository(ScanHistoryRepository):
    """Keeps the most recent scans in a bounded list."""

    max_items: int = 500
    items: list[ScannedItem] = field(default_factory=list)

    def add_item(self, item: ScannedItem) -> None:
        """Append an item, dropping the oldest beyond max_items."""
        self.items.append(item)
        if len(self.items) > self.max_items:
            del self.items[: len(self.items) - self.max_items]

    def list_items(self, limit: int) -> list[ScannedItem]:
        """Return up to limit items, most recent first."""
        return list(reversed(self.items))[:limit]

    def clear(self) -> None:
        """Remove every item."""
        self.items.clear()
