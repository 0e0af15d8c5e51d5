from datetime import datetime

from pydantic import BaseModel

from cigrader.domain.value_objects import AssessmentType, ParticipationRole


class Participation(BaseModel, frozen=True):
    id: int
    role: ParticipationRole
    plan_key: str
    exercise_id: int
    due_date: datetime | None = None
    assessment_type: AssessmentType = AssessmentType.AUTOMATIC
    static_analysis_enabled: bool = False
    initialized_at: datetime | None = None
