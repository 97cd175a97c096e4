from __future__ import annotations

from dataclasses import dataclass, field

from fleetlog.importers.utils import clean_text, norm_header
from fleetlog.importers.workbook import RawCellGrid

DATE_LABEL = "date"
TRIP_ANCHORS = frozenset({"litres", "driver", "opening km", "opening hrs", "opening hours"})
SERVICE_ANCHORS = frozenset({"supplier", "opening km"})

@dataclass(frozen=True)
class HeaderIndex:
    """Canonical header labels of one sheet and where its data starts.

    Lookups of labels the sheet does not carry return None.
    """

    labels: tuple[str, ...]
    header_row: int
    _first: dict[str, int] = field(default_factory=dict, repr=False, compare=False)
    _last: dict[str, int] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_row(cls, row, header_row: int) -> "HeaderIndex":
        labels = tuple(norm_header(clean_text(c)) for c in row)
        first: dict[str, int] = {}
        last: dict[str, int] = {}
        for i, label in enumerate(labels):
            if not label:
                continue
            first.setdefault(label, i)
            last[label] = i
        return cls(labels=labels, header_row=header_row, _first=first, _last=last)

    @property
    def data_start(self) -> int:
        return self.header_row + 1

    def __contains__(self, label: str) -> bool:
        return norm_header(label) in self._first

    def get(self, label: str) -> int | None:
        return self._first.get(norm_header(label))

    def last(self, label: str) -> int | None:
        return self._last.get(norm_header(label))

    def find(self, synonyms, *, prefer_last: bool = False) -> int | None:
        lookup = self.last if prefer_last else self.get
        for s in synonyms:
            idx = lookup(s)
            if idx is not None:
                return idx
        return None

def locate_header(rows: RawCellGrid, anchors=TRIP_ANCHORS) -> HeaderIndex | None:
    for i, r in enumerate(rows):
        r = r or []
        headers = {norm_header(clean_text(c)) for c in r}
        if DATE_LABEL in headers and headers & anchors:
            return HeaderIndex.from_row(r, i)
    return None
