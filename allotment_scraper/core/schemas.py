from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class Option(BaseModel):
    """A selectable entry of a dropdown."""
    label: str = Field(description="Visible option text, trimmed")
    value: str = Field(description="Form value submitted for this option")


class AllotmentRecord(BaseModel):
    """One row of the allotment results table.

    Field order is the CSV column order. Integer columns hold None when the
    cell text is not a number.
    """
    sno: Optional[int] = None
    hallticketno: Optional[str] = None
    rank: Optional[int] = None
    name: Optional[str] = None
    sex: Optional[str] = None
    caste: Optional[str] = None
    region: Optional[str] = None
    seatcategory: Optional[str] = None


LeafStatus = Literal["EMPTY", "RECORDS", "FAILED"]


class LeafResult(BaseModel):
    """Outcome of one (college, branch) crawl unit."""
    top: Option
    second: Option
    status: LeafStatus
    record_count: int = 0
    reason: Optional[str] = Field(default=None, description="Failure message when status is FAILED")
    output_path: Optional[str] = Field(default=None, description="CSV written when status is RECORDS")

    @property
    def key(self) -> str:
        return f"{self.top.label} -> {self.second.label}"


class Abandonment(BaseModel):
    """A college whose remaining branches were skipped after a session fault."""
    top: Option
    reason: str
    skipped: Optional[List[str]] = Field(
        default=None,
        description="Labels of branches never attempted; None if branches could not be listed",
    )


class CrawlReport(BaseModel):
    """Aggregate bookkeeping for one crawl."""
    started_at: str
    finished_at: Optional[str] = None
    top_level_options: List[Option] = Field(default_factory=list)
    leaves: List[LeafResult] = Field(default_factory=list)
    abandoned: List[Abandonment] = Field(default_factory=list)
    logs: List[str] = Field(default_factory=list)

    def _count(self, status: LeafStatus) -> int:
        return sum(1 for leaf in self.leaves if leaf.status == status)

    @property
    def leaves_attempted(self) -> int:
        return len(self.leaves)

    @property
    def files_written(self) -> int:
        return self._count("RECORDS")

    @property
    def empty_leaves(self) -> int:
        return self._count("EMPTY")

    @property
    def failed_leaves(self) -> int:
        return self._count("FAILED")
