from datetime import datetime

from pydantic import BaseModel, Field

from cigrader.domain.value_objects import AssessmentType, FeedbackCategory


class Feedback(BaseModel, frozen=True):
    key: str
    passed: bool
    detail_text: str | None = None
    category: FeedbackCategory = FeedbackCategory.TEST_CASE


class Result(BaseModel, frozen=True):
    id: int | None = None
    submission_id: int | None = None
    participation_id: int
    successful: bool
    result_string: str
    # Weighted scoring happens downstream; 0.0 marks "not scored yet".
    score: float = 0.0
    completion_date: datetime
    assessment_type: AssessmentType = AssessmentType.AUTOMATIC
    rated: bool
    has_feedback: bool = False
    feedbacks: list[Feedback] = Field(default_factory=list)

    @property
    def failed_feedbacks(self) -> list[Feedback]:
        return [f for f in self.feedbacks if not f.passed]
