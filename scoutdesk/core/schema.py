from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

Category = Literal["added", "review", "rejected"]
QueueStatus = Literal["pending", "review", "approved", "rejected"]


class ReportSummary(BaseModel):
    evaluated: int = 0
    added: int = 0
    review: int = 0
    rejected: int = 0

    @property
    def processed(self) -> int:
        return self.added + self.review + self.rejected

    @property
    def has_count_mismatch(self) -> bool:
        """``evaluated`` reported but nothing landed in any category."""

        return self.evaluated > 0 and self.processed == 0


class ParsedTechnology(BaseModel):
    name: str
    provider: str
    score: int
    reason: str = ""
    trl: int | None = None
    country: str | None = None
    queue_id: str | None = None


class TechnologyBuckets(BaseModel):
    added: list[ParsedTechnology] = Field(default_factory=list)
    review: list[ParsedTechnology] = Field(default_factory=list)
    rejected: list[ParsedTechnology] = Field(default_factory=list)

    def bucket(self, category: Category) -> list[ParsedTechnology]:
        return getattr(self, category)

    def total(self) -> int:
        return len(self.added) + len(self.review) + len(self.rejected)


class ParsedReport(BaseModel):
    summary: ReportSummary = Field(default_factory=ReportSummary)
    technologies: TechnologyBuckets = Field(default_factory=TechnologyBuckets)
    conclusions: list[str] = Field(default_factory=list)
    recommendations: list[str] = Field(default_factory=list)
    technical_errors: list[str] = Field(default_factory=list)
    had_technical_issues: bool = False
    raw_text: str = ""


class QueueRecord(BaseModel):
    id: str
    name: str
    provider: str
    country: str = "N/A"
    score: float = 0
    trl: int | float = 0
    status: str

    @classmethod
    def from_api(cls, item: dict[str, Any]) -> "QueueRecord":
        """Normalise a queue row from the remote API (Spanish field names)."""

        score = item.get("relevance_score")
        trl = item.get("trl_estimado")
        return cls(
            id=str(item["id"]),
            name=item.get("nombre") or "Sin nombre",
            provider=item.get("proveedor") or "Desconocido",
            country=item.get("pais") or "N/A",
            score=score if score is not None else 0,
            trl=trl if trl is not None else 0,
            status=str(item.get("status") or ""),
        )
