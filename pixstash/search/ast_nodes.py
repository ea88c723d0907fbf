"""Data classes for parsed tag queries and the records they are evaluated against."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

# Tag-count filter kinds
TAGCOUNT_EXACT = "exact"
TAGCOUNT_CMP = "cmp"
TAGCOUNT_RANGE = "range"
TAGCOUNT_LIST = "list"


@dataclass(frozen=True)
class TagCountFilter:
    """A ``tagcount:`` constraint.

    Kinds:
        - ``exact``: ``tagcount:N``, value=N
        - ``cmp``: ``tagcount:>N`` and friends, op in ``> < >= <=``, value=N
        - ``range``: ``tagcount:N..M``, inclusive, min <= max always
        - ``list``: ``tagcount:A,B,C``, values in written order, duplicates kept
    """

    kind: str
    value: int | None = None
    op: str | None = None
    min: int | None = None
    max: int | None = None
    values: tuple[int, ...] = ()

    @classmethod
    def exact(cls, value: int) -> TagCountFilter:
        return cls(kind=TAGCOUNT_EXACT, value=value)

    @classmethod
    def cmp(cls, op: str, value: int) -> TagCountFilter:
        return cls(kind=TAGCOUNT_CMP, op=op, value=value)

    @classmethod
    def range(cls, a: int, b: int) -> TagCountFilter:
        return cls(kind=TAGCOUNT_RANGE, min=min(a, b), max=max(a, b))

    @classmethod
    def list(cls, values: Iterable[int]) -> TagCountFilter:
        return cls(kind=TAGCOUNT_LIST, values=tuple(values))

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly dict holding only the fields of this kind."""
        if self.kind == TAGCOUNT_LIST:
            return {"kind": self.kind, "values": list(self.values)}
        if self.kind == TAGCOUNT_RANGE:
            return {"kind": self.kind, "min": self.min, "max": self.max}
        if self.kind == TAGCOUNT_CMP:
            return {"kind": self.kind, "op": self.op, "value": self.value}
        return {"kind": self.kind, "value": self.value}


@dataclass
class MetatagFragments:
    """Typed values collected from ``key:value`` clauses of a query."""

    ratings: set[str] = field(default_factory=set)
    include_unrated: bool = False
    file_types: set[str] = field(default_factory=set)
    tag_count: TagCountFilter | None = None
    accounts: set[str] = field(default_factory=set)
    exclude_accounts: set[str] = field(default_factory=set)


@dataclass
class StructuredFilter:
    """A parsed tag query, ready for evaluation.

    ``include_tags`` are ANDed, each entry of ``or_groups`` needs at least
    one member present, and none of ``exclude_tags`` may be present. The
    metatag fields are skipped when empty.
    """

    include_tags: list[str] = field(default_factory=list)
    exclude_tags: list[str] = field(default_factory=list)
    or_groups: list[list[str]] = field(default_factory=list)
    ratings: set[str] = field(default_factory=set)
    include_unrated: bool = False
    file_types: set[str] = field(default_factory=set)
    tag_count: TagCountFilter | None = None
    accounts: set[str] = field(default_factory=set)
    exclude_accounts: set[str] = field(default_factory=set)

    def is_empty(self) -> bool:
        """True when the filter has no clauses and matches every record."""
        return not (
            self.include_tags
            or self.exclude_tags
            or self.or_groups
            or self.ratings
            or self.include_unrated
            or self.file_types
            or self.tag_count is not None
            or self.accounts
            or self.exclude_accounts
        )

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation (sets become sorted lists)."""
        return {
            "include_tags": list(self.include_tags),
            "exclude_tags": list(self.exclude_tags),
            "or_groups": [list(g) for g in self.or_groups],
            "ratings": sorted(self.ratings),
            "include_unrated": self.include_unrated,
            "file_types": sorted(self.file_types),
            "tag_count": self.tag_count.to_dict() if self.tag_count else None,
            "accounts": sorted(self.accounts),
            "exclude_accounts": sorted(self.exclude_accounts),
        }


@dataclass(frozen=True)
class EvaluableRecord:
    """The read-only view of a saved image that the evaluator needs."""

    tags: frozenset[str] = frozenset()
    rating: str | None = None
    mime_type: str = ""
    tag_count: int = 0
    account: str | None = None
    key: str | None = None

    @classmethod
    def from_tags(
        cls,
        tags: Iterable[str],
        *,
        rating: str | None = None,
        mime_type: str = "",
        account: str | None = None,
        key: str | None = None,
    ) -> EvaluableRecord:
        """Build a record whose ``tag_count`` is the number of distinct tags."""
        tag_set = frozenset(tags)
        return cls(
            tags=tag_set,
            rating=rating,
            mime_type=mime_type,
            tag_count=len(tag_set),
            account=account,
            key=key,
        )
