"""Install, test and risk checklists for catalog workflows."""

from __future__ import annotations
from flowdex.catalog.models import CatalogWorkflow, Complexity, WorkflowInstallPlan


MULTIPLE_CREDENTIALS_THRESHOLD = 3

INSTALL_STEPS: tuple[str, ...] = (
    "Download the workflow JSON from the catalog.",
    "In n8n, go to Workflows → Import → From File (or From URL).",
    "Create the required credentials and assign them to nodes.",
    "Review node parameters (URLs, IDs, filters) before enabling.",
    "Run a test execution, then activate the workflow.",
)

WEBHOOK_TEST_STEP = (
    "Trigger the Webhook node with a test request and verify the execution output."
)
SCHEDULE_TEST_STEP = (
    "Use manual execution first; then verify the schedule trigger timing."
)
DEFAULT_TEST_STEP = "Click “Execute workflow” in n8n and verify each node output."

HIGH_COMPLEXITY_RISK = "High complexity: expect more configuration and edge cases."
HTTP_RISK = (
    "HTTP nodes detected: validate external endpoints, timeouts, retries, "
    "and allowlists."
)
CODE_RISK = "Code nodes detected: require code review for security and maintenance."
CREDENTIALS_RISK = (
    "Multiple credentials required: plan a secure credential handoff and "
    "rotation policy."
)
BASELINE_RISK = (
    "Standard automation risk: validate credentials scope and logging before "
    "go-live."
)


def build_install_plan(meta: CatalogWorkflow) -> WorkflowInstallPlan:
    """Derive the install checklist for ``meta``.

    Test steps and risk notes are never empty; when no specific rule applies a
    generic entry is used.
    """
    test_steps: list[str] = []
    if meta.has_node_type("webhook"):
        test_steps.append(WEBHOOK_TEST_STEP)
    if meta.has_node_type("cron", "schedule"):
        test_steps.append(SCHEDULE_TEST_STEP)
    if not test_steps:
        test_steps.append(DEFAULT_TEST_STEP)

    risk_notes: list[str] = []
    if meta.complexity is Complexity.HIGH:
        risk_notes.append(HIGH_COMPLEXITY_RISK)
    if meta.has_node_type("http"):
        risk_notes.append(HTTP_RISK)
    if meta.has_node_type("code", "function"):
        risk_notes.append(CODE_RISK)
    if len(meta.credentials) > MULTIPLE_CREDENTIALS_THRESHOLD:
        risk_notes.append(CREDENTIALS_RISK)
    if not risk_notes:
        risk_notes.append(BASELINE_RISK)

    return WorkflowInstallPlan(
        credential_checklist=tuple(meta.credentials),
        install_steps=INSTALL_STEPS,
        test_steps=tuple(test_steps),
        risk_notes=tuple(risk_notes),
    )


__all__ = [
    "BASELINE_RISK",
    "CODE_RISK",
    "CREDENTIALS_RISK",
    "DEFAULT_TEST_STEP",
    "HIGH_COMPLEXITY_RISK",
    "HTTP_RISK",
    "INSTALL_STEPS",
    "SCHEDULE_TEST_STEP",
    "WEBHOOK_TEST_STEP",
    "build_install_plan",
]
