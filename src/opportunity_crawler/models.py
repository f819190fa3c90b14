from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Any

from opportunity_crawler.utils.text import slugify

DEFAULT_AMOUNT = "See Guidelines"
DEFAULT_DEADLINE = "Check Portal"


class OpportunityKind(str, Enum):
    SCHOLARSHIP = "scholarship"
    JOB = "job"

    @property
    def collection(self) -> str:
        return _COLLECTIONS[self]


_COLLECTIONS = {
    OpportunityKind.SCHOLARSHIP: "scholarships",
    OpportunityKind.JOB: "jobs",
}


@dataclass(slots=True, frozen=True)
class Opportunity:
    id: str
    name: str
    kind: OpportunityKind
    category: str
    source_url: str
    description: str
    amount: str = DEFAULT_AMOUNT
    deadline: str = DEFAULT_DEADLINE
    open_date: str | None = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        kind: OpportunityKind,
        category: str,
        source_url: str,
        description: str,
        amount: str = DEFAULT_AMOUNT,
        deadline: str = DEFAULT_DEADLINE,
        open_date: str | None = None,
    ) -> Opportunity:
        return cls(
            id=slugify(name),
            name=name,
            kind=kind,
            category=category,
            source_url=source_url,
            description=description,
            amount=amount,
            deadline=deadline,
            open_date=open_date,
        )

    def to_document(self) -> dict[str, Any]:
        document = asdict(self)
        document["kind"] = self.kind.value
        if self.open_date is None:
            document.pop("open_date")
        return document
