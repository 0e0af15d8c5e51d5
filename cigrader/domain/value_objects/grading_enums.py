from enum import Enum


class ParticipationRole(str, Enum):
    TEMPLATE = "template"
    SOLUTION = "solution"
    STUDENT = "student"


class SubmissionType(str, Enum):
    MANUAL = "manual"
    INSTRUCTOR = "instructor"
    TEST = "test"
    OTHER = "other"
    EXTERNAL = "external"


class AssessmentType(str, Enum):
    AUTOMATIC = "automatic"
    SEMI_AUTOMATIC = "semi_automatic"
    MANUAL = "manual"


class FeedbackCategory(str, Enum):
    TEST_CASE = "test_case"
    STATIC_ANALYSIS = "static_analysis"


class IgnoreReason(str, Enum):
    FIRST_BUILD = "first_build"
    DUPLICATE = "duplicate"


class BuildStatus(str, Enum):
    INACTIVE = "inactive"
    QUEUED = "queued"
    BUILDING = "building"
