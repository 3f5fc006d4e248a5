"""Static workflow templates."""

from ..models import AgentRole, WorkflowDefinition, WorkflowPattern, WorkflowStep


def _steps(*roles: AgentRole) -> tuple[WorkflowStep, ...]:
    return tuple(WorkflowStep(role=role) for role in roles)


WORKFLOW_TEMPLATES: tuple[WorkflowDefinition, ...] = (
    WorkflowDefinition(
        id="code-review-workflow",
        name="Code Review",
        pattern=WorkflowPattern.SEQUENTIAL,
        steps=_steps(AgentRole.SCOUT, AgentRole.CODE_REVIEWER, AgentRole.SECURITY_AUDITOR),
    ),
    WorkflowDefinition(
        id="feature-implementation",
        name="Feature Implementation",
        pattern=WorkflowPattern.SEQUENTIAL,
        steps=_steps(
            AgentRole.PLANNER, AgentRole.IMPLEMENTER, AgentRole.TESTER, AgentRole.DOCUMENTER
        ),
    ),
    WorkflowDefinition(
        id="comprehensive-analysis",
        name="Comprehensive Analysis",
        pattern=WorkflowPattern.FAN_OUT,
        steps=_steps(
            AgentRole.SCOUT,
            AgentRole.SECURITY_AUDITOR,
            AgentRole.OPTIMIZER,
            AgentRole.CODE_REVIEWER,
            AgentRole.AGGREGATOR,
        ),
    ),
    WorkflowDefinition(
        id="brainstorm-and-plan",
        name="Brainstorm & Plan",
        pattern=WorkflowPattern.SEQUENTIAL,
        steps=_steps(AgentRole.BRAINSTORMER, AgentRole.RESEARCHER, AgentRole.PLANNER),
    ),
    WorkflowDefinition(
        id="debug-and-fix",
        name="Debug & Fix",
        pattern=WorkflowPattern.SEQUENTIAL,
        steps=_steps(AgentRole.DEBUGGER, AgentRole.IMPLEMENTER, AgentRole.TESTER),
    ),
)


def get_template(workflow_id: str) -> WorkflowDefinition | None:
    """Find a template by id."""
    for template in WORKFLOW_TEMPLATES:
        if template.id == workflow_id:
            return template
    return None
