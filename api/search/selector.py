"""
Code-coverage document selection.

Given a catalog of documents (each tagged with comma-separated codes) and a
list of requested codes, pick few, recent documents that together carry as
many of the requested codes as possible.

Flow:
1) Normalize requested codes (trim + uppercase, blanks dropped)
2) Build each document's code set
3) Per requested code, list matching documents newest first
4) Greedy cover: repeatedly take the document adding the most uncovered codes

Exact minimum cover is NP-hard; the greedy loop is the usual approximation.
Everything here is pure: no I/O, no module-level state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Sequence


class RequestError(ValueError):
    """Requested codes are absent, empty, or blank after normalization."""


@dataclass(frozen=True)
class Document:
    id: int
    name: str
    date: str
    codes: str
    file_path: str

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Document":
        return cls(
            id=int(row["id"]),
            name=str(row["name"]),
            date=str(row["date"]),
            codes=str(row["codes"] or ""),
            file_path=str(row["file_path"] or ""),
        )

    def as_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "date": self.date,
            "codes": self.codes,
            "file_path": self.file_path,
        }


@dataclass
class CoverageEntry:
    document: Document
    codes: set[str] = field(default_factory=set)


@dataclass(frozen=True)
class Selection:
    documents: list[Document]
    requested_codes: list[str]
    covered_codes: list[str]
    missing_codes: list[str]


def normalize_code(raw: str) -> str:
    return raw.strip().upper()


def normalize_requested(codes: Sequence[str] | None) -> list[str]:
    """
    Canonicalize requested codes, keeping first-seen order.

    Raises RequestError when nothing usable is left.
    """
    if not isinstance(codes, (list, tuple)):
        raise RequestError("invalid or empty codes")

    out: list[str] = []
    for raw in codes:
        if not isinstance(raw, str):
            raise RequestError("invalid or empty codes")
        code = normalize_code(raw)
        if code and code not in out:
            out.append(code)

    if not out:
        raise RequestError("invalid or empty codes")
    return out


def code_set(raw_codes: str) -> frozenset[str]:
    return frozenset(c for c in (normalize_code(p) for p in (raw_codes or "").split(",")) if c)


def by_recency(documents: Iterable[Document]) -> list[Document]:
    # sorted() is stable with reverse=True, so equal dates keep catalog order.
    return sorted(documents, key=lambda d: d.date, reverse=True)


def candidates_by_code(
    catalog: Sequence[Document],
    requested: Sequence[str],
) -> dict[str, list[Document]]:
    code_sets = [(doc, code_set(doc.codes)) for doc in catalog]
    return {
        code: by_recency(doc for doc, codes in code_sets if code in codes)
        for code in requested
    }


def build_coverage(
    catalog: Sequence[Document],
    per_code: Mapping[str, Sequence[Document]],
) -> list[CoverageEntry]:
    """
    One entry per document that satisfies at least one requested code,
    ordered newest first (catalog order on equal dates).
    """
    entries: dict[int, CoverageEntry] = {}
    for code, docs in per_code.items():
        for doc in docs:
            entries.setdefault(doc.id, CoverageEntry(doc)).codes.add(code)

    # A repeated id yields one candidate, placed where it first sorts.
    ordered: list[CoverageEntry] = []
    for doc in by_recency(catalog):
        entry = entries.pop(doc.id, None)
        if entry is not None:
            ordered.append(entry)
    return ordered


def greedy_cover(candidates: list[CoverageEntry], remaining: set[str]) -> list[Document]:
    """
    Consume `candidates` and `remaining`, returning documents in pick order.
    """
    selected: list[Document] = []
    while remaining and candidates:
        best_index = -1
        best_gain = 0
        for i, entry in enumerate(candidates):
            gain = len(entry.codes & remaining)
            if gain > best_gain:
                best_index, best_gain = i, gain

        if best_index < 0:
            break

        best = candidates.pop(best_index)
        selected.append(best.document)
        remaining -= best.codes
    return selected


def select_with_coverage(
    catalog: Sequence[Document],
    requested_codes: Sequence[str] | None,
) -> Selection:
    requested = normalize_requested(requested_codes)

    per_code = candidates_by_code(catalog, requested)
    missing = [code for code in requested if not per_code[code]]
    coverable = {code for code in requested if per_code[code]}

    candidates = build_coverage(catalog, per_code)
    documents = greedy_cover(candidates, set(coverable))

    return Selection(
        documents=documents,
        requested_codes=requested,
        covered_codes=[code for code in requested if code in coverable],
        missing_codes=missing,
    )


def select(catalog: Sequence[Document], requested_codes: Sequence[str] | None) -> list[Document]:
    return select_with_coverage(catalog, requested_codes).documents
