# Repository names as they appear in the CI system's VCS change list.
ASSIGNMENT_REPO_NAME = "assignment"
TEST_REPO_NAME = "tests"

# Plan key suffixes of the exercise-level build plans.
TEMPLATE_PLAN_SUFFIX = "BASE"
SOLUTION_PLAN_SUFFIX = "SOLUTION"
