"""Task Schemas — task creation, submission and review bodies.

Invariants:
    - maxPoints > 0; pointsAwarded >= 0 (upper bound checked against the task)
    - proofURLs holds 1-10 http(s) URLs
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator


class TaskCreate(BaseModel):
    """Body of POST /tasks."""
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=10_000)
    max_points: int = Field(alias="maxPoints", gt=0)
    due_date: datetime | None = Field(None, alias="dueDate")

    @field_validator("title", "description")
    @classmethod
    def strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Title and description cannot be blank")
        return v


class SubmissionCreate(BaseModel):
    """Body of POST /tasks/{task_id}/submissions."""
    model_config = ConfigDict(populate_by_name=True)

    proof_urls: list[HttpUrl] = Field(alias="proofURLs", min_length=1, max_length=10)
    comments: str | None = Field(None, max_length=2000)

    def urls(self) -> list[str]:
        return [str(url) for url in self.proof_urls]


class SubmissionReview(BaseModel):
    """Body of PUT /submissions/{submission_id}/review."""
    model_config = ConfigDict(populate_by_name=True)

    points_awarded: int = Field(alias="pointsAwarded", ge=0)
    review_comments: str | None = Field(None, alias="reviewComments", max_length=2000)
