from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class Grant:
    """Canonical grant record with the fields derived at ingestion."""

    id: str
    funding_body: str
    scheme: str = ""
    organisation: str = ""
    investigators: str = ""
    date: str = ""
    summary: str = ""
    funding: float = 0.0
    year: str = "Unknown"
    tokenized_summary: frozenset[str] = field(default_factory=frozenset, repr=False)
    is_in_subset: bool = False

    @property
    def subset_status(self) -> str:
        return "Subset" if self.is_in_subset else "Other"
