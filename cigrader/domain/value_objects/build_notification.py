"""Build-completion notification as posted by the CI server.

Field names follow the CI server's JSON payload (camelCase on the wire,
snake_case in Python). Only the fields required to grade a build are
mandatory; everything else defaults to empty so that partial payloads degrade
instead of failing. Timestamps must carry a UTC offset.
"""

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from cigrader.domain.value_objects.repository_names import ASSIGNMENT_REPO_NAME, TEST_REPO_NAME

FIRST_BUILD_MARKER = "First build for this plan"
NO_TESTS_FOUND = "No tests found"


class _WireModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PlanInfo(_WireModel):
    key: str = Field(min_length=1)


class BuildTestSummary(_WireModel):
    total_count: int
    successful_count: int
    description: str


class JobTestCase(_WireModel):
    name: str
    class_name: str | None = None
    method_name: str | None = None
    errors: list[str] = Field(default_factory=list)


class StaticAnalysisIssue(_WireModel):
    file_path: str = ""
    start_line: int | None = None
    end_line: int | None = None
    rule: str = ""
    category: str = ""
    message: str = ""
    priority: str | None = None


class StaticAnalysisReport(_WireModel):
    tool: str
    issues: list[StaticAnalysisIssue] = Field(default_factory=list)


class JobLogLine(_WireModel):
    date: AwareDatetime
    log: str


class BuildJob(_WireModel):
    id: int | None = None
    failed_tests: list[JobTestCase] = Field(default_factory=list)
    successful_tests: list[JobTestCase] = Field(default_factory=list)
    static_code_analysis_reports: list[StaticAnalysisReport] = Field(default_factory=list)
    logs: list[JobLogLine] = Field(default_factory=list)


class VcsChange(_WireModel):
    repository_name: str
    commit_hash: str = Field(alias="id")


class BuildInfo(_WireModel):
    successful: bool
    build_completed_date: AwareDatetime
    test_summary: BuildTestSummary
    jobs: list[BuildJob] = Field(default_factory=list)
    vcs: list[VcsChange] = Field(default_factory=list)
    reason: str | None = None
    artifact: bool = False


class BuildNotification(_WireModel):
    plan: PlanInfo
    build: BuildInfo

    @property
    def plan_key(self) -> str:
        return self.plan.key

    def is_first_build(self) -> bool:
        """True for the synthetic build the CI server runs when a plan is created."""
        reason = self.build.reason
        return reason is not None and FIRST_BUILD_MARKER in reason

    def commit_hash_for(self, repository_name: str) -> str | None:
        """Commit hash of the first change of the given repository, if any."""
        for change in self.build.vcs:
            if change.repository_name.lower() == repository_name.lower():
                return change.commit_hash
        return None

    @property
    def assignment_commit_hash(self) -> str | None:
        return self.commit_hash_for(ASSIGNMENT_REPO_NAME)

    @property
    def tests_commit_hash(self) -> str | None:
        return self.commit_hash_for(TEST_REPO_NAME)
