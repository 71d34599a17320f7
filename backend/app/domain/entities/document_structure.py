"""Domain entity for the structural index built from one document's lines."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class StructureElement:
    """One tagged line of the source document."""

    line_index: int
    content: str
    level: int | None = None  # headings only: 1..3


@dataclass
class DocumentStructure:
    """Parallel lists of tagged line indices for one normalized document.

    A line may appear in several lists at once (e.g. a numbered heading is
    also a list item). Lists are in ascending line order.
    """

    line_count: int = 0
    headings: list[StructureElement] = field(default_factory=list)
    list_items: list[StructureElement] = field(default_factory=list)
    table_rows: list[StructureElement] = field(default_factory=list)
    separators: list[StructureElement] = field(default_factory=list)

    @property
    def element_count(self) -> int:
        return len(self.headings) + len(self.list_items) + len(self.table_rows)
