"""
Taxonomy Term Sources

Defines the read-only option-source boundary used by taxonomy-backed filters
and an in-memory implementation backed by a plain list of terms.
"""

from dataclasses import dataclass
from typing import Iterable, List, Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class Term:
    """A single value within a hierarchical or flat vocabulary."""
    term_id: int
    name: str
    taxonomy: str
    slug: str = ""
    parent: int = 0
    count: int = 0


@runtime_checkable
class TermProvider(Protocol):
    """Read-only access to taxonomy terms."""

    def get_terms(
        self,
        taxonomy: str,
        hide_empty: bool = True,
        parent: Optional[int] = None,
        orderby: str = "name",
        order: str = "ASC",
        number: Optional[int] = None,
    ) -> List[Term]: ...

    def get_term(self, term_id: int, taxonomy: str) -> Optional[Term]: ...


class InMemoryTermProvider:
    """
    Term provider operating on an in-memory list of terms.

    Supports the subset of lookups the filters need: listing a taxonomy's
    terms (optionally non-empty only, optionally under one parent), ordering
    by name or usage count, capping the result size and resolving a single
    term by id.
    """

    def __init__(self, terms: Optional[Iterable[Term]] = None) -> None:
        self._terms: List[Term] = list(terms or [])

    def add(self, term: Term) -> None:
        self._terms.append(term)

    def get_terms(
        self,
        taxonomy: str,
        hide_empty: bool = True,
        parent: Optional[int] = None,
        orderby: str = "name",
        order: str = "ASC",
        number: Optional[int] = None,
    ) -> List[Term]:
        terms = [t for t in self._terms if t.taxonomy == taxonomy]
        if hide_empty:
            terms = [t for t in terms if t.count > 0]
        if parent is not None:
            terms = [t for t in terms if t.parent == parent]

        reverse = order.upper() == "DESC"
        if orderby == "count":
            terms.sort(key=lambda t: t.count, reverse=reverse)
        elif orderby == "id":
            terms.sort(key=lambda t: t.term_id, reverse=reverse)
        else:
            terms.sort(key=lambda t: t.name.lower(), reverse=reverse)

        if number is not None and number > 0:
            terms = terms[:number]
        return terms

    def get_term(self, term_id: int, taxonomy: str) -> Optional[Term]:
        for term in self._terms:
            if term.term_id == term_id and term.taxonomy == taxonomy:
                return term
        return None

    def __len__(self) -> int:
        return len(self._terms)
