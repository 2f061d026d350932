from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Union

from unbox.cases.items import Case
from unbox.config import CASES_PATH
from unbox.errors import RemoteUnavailable
from unbox.remote.documents import DocumentStore

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderedList:
    """Preferred document shape: `[{"id": ..., "data": {...}}, ...]`."""

    entries: list[Any]


@dataclass(frozen=True)
class LegacyMap:
    """Older shape: `{id: {...}}`; order is whatever the keys enumerate in."""

    cases: dict[str, Any]


CatalogDocument = Union[OrderedList, LegacyMap]


@dataclass
class Catalog:
    cases: dict[str, Case] = field(default_factory=dict)
    order: list[str] = field(default_factory=list)

    def ordered(self) -> list[Case]:
        return [self.cases[case_id] for case_id in self.order if case_id in self.cases]

    def get(self, case_id: str) -> Case | None:
        return self.cases.get(case_id)

    def first_id(self) -> str | None:
        return self.order[0] if self.order else None

    def to_document(self) -> list[dict[str, Any]]:
        return [{"id": case.case_id, "data": case.to_dict()} for case in self.ordered()]


def classify_document(document: Any) -> CatalogDocument | None:
    if isinstance(document, list):
        return OrderedList(document)
    if isinstance(document, dict):
        return LegacyMap(document)
    return None


def _parse_case(case_id: str, data: Any) -> Case | None:
    if not isinstance(data, dict):
        log.warning("case %s is not an object; skipped", case_id)
        return None
    try:
        case = Case.from_dict(case_id, data)
    except ValueError as exc:
        log.warning("case %s has a malformed item (%s); skipped", case_id, exc)
        return None
    if not case.items:
        log.warning("case %s has no items; skipped", case_id)
        return None
    if case.total_weight() <= 0:
        log.warning("case %s has no weight; skipped", case_id)
        return None
    return case


def resolve_document(document: CatalogDocument | None) -> Catalog:
    """Collapse either document shape into one ordered catalog."""
    catalog = Catalog()
    if isinstance(document, OrderedList):
        pairs: list[tuple[str, Any]] = []
        for entry in document.entries:
            if not isinstance(entry, dict) or not entry.get("id"):
                continue
            pairs.append((str(entry["id"]), entry.get("data")))
    elif isinstance(document, LegacyMap):
        pairs = [(str(case_id), data) for case_id, data in document.cases.items()]
    else:
        return catalog
    for case_id, data in pairs:
        # First occurrence of an id wins.
        if case_id in catalog.cases:
            continue
        case = _parse_case(case_id, data)
        if case is None:
            continue
        catalog.cases[case_id] = case
        catalog.order.append(case_id)
    return catalog


class CatalogStore:
    """Read-only (for the reveal flow) view of the authored cases."""

    def __init__(self, documents: DocumentStore, path: str = CASES_PATH) -> None:
        self.documents = documents
        self.path = path
        self.catalog = Catalog()

    def load(self) -> Catalog:
        try:
            document = self.documents.get(self.path)
        except RemoteUnavailable as exc:
            log.warning("catalog load failed: %s", exc)
            document = None
        self.catalog = resolve_document(classify_document(document))
        log.info("loaded %d cases", len(self.catalog.order))
        return self.catalog

    def save(self, catalog: Catalog) -> bool:
        """Write the catalog back in the ordered shape (used by the case editor)."""
        try:
            self.documents.put(self.path, catalog.to_document())
        except RemoteUnavailable as exc:
            log.warning("catalog save failed: %s", exc)
            return False
        self.catalog = catalog
        return True
