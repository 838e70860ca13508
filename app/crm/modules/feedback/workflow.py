"""
Status workflows for feedback items.

Each feedback type owns a closed, ordered set of statuses. The order is
presentation order, not a linear progression: several terminal statuses are
siblings. A spelling shared between workflows ("pending", "declined") is a
separate state in each one, so validation always goes through the workflow
of the record's own type.
"""
from __future__ import annotations

from dataclasses import dataclass

from app.crm.errors import InvalidStatusError, UnknownWorkflowError

BUG_REPORT = "bug_report"
FEATURE_REQUEST = "feature_request"
GENERAL_FEEDBACK = "general_feedback"

FEEDBACK_TYPES = (FEATURE_REQUEST, BUG_REPORT, GENERAL_FEEDBACK)
PRIORITIES = ("low", "medium", "high")

# Tones drive status iconography in clients.
TONE_DONE = "done"
TONE_REJECTED = "rejected"
TONE_ACKNOWLEDGED = "acknowledged"
TONE_REVIEWING = "reviewing"
TONE_ACTIVE = "active"
TONE_UNCLEAR = "unclear"
TONE_WAITING = "waiting"


@dataclass(frozen=True)
class StatusOption:
    value: str
    label: str
    terminal: bool = False
    tone: str = TONE_WAITING

    def to_dict(self) -> dict:
        return {"value": self.value, "label": self.label, "terminal": self.terminal, "tone": self.tone}


@dataclass(frozen=True)
class Workflow:
    feedback_type: str
    options: tuple[StatusOption, ...]

    @property
    def statuses(self) -> tuple[str, ...]:
        return tuple(o.value for o in self.options)

    @property
    def initial(self) -> str:
        return self.options[0].value

    def option(self, status: str) -> StatusOption:
        for o in self.options:
            if o.value == status:
                return o
        raise InvalidStatusError(status, self.feedback_type, self.statuses)

    def allows(self, status: str) -> bool:
        return status in self.statuses

    def is_terminal(self, status: str) -> bool:
        return self.option(status).terminal


WORKFLOWS: dict[str, Workflow] = {
    BUG_REPORT: Workflow(
        BUG_REPORT,
        (
            StatusOption("pending", "Pending"),
            StatusOption("under_investigation", "Under Investigation", tone=TONE_REVIEWING),
            StatusOption("in_progress", "In Progress", tone=TONE_ACTIVE),
            StatusOption("fixed", "Fixed", terminal=True, tone=TONE_DONE),
            StatusOption("wont_fix", "Won't Fix", terminal=True, tone=TONE_REJECTED),
            StatusOption("cannot_reproduce", "Cannot Reproduce", terminal=True, tone=TONE_UNCLEAR),
        ),
    ),
    FEATURE_REQUEST: Workflow(
        FEATURE_REQUEST,
        (
            StatusOption("pending", "Pending"),
            StatusOption("under_review", "Under Review", tone=TONE_REVIEWING),
            StatusOption("planned", "Planned", tone=TONE_ACKNOWLEDGED),
            StatusOption("in_development", "In Development", tone=TONE_ACTIVE),
            StatusOption("completed", "Completed", terminal=True, tone=TONE_DONE),
            StatusOption("declined", "Declined", terminal=True, tone=TONE_REJECTED),
        ),
    ),
    GENERAL_FEEDBACK: Workflow(
        GENERAL_FEEDBACK,
        (
            StatusOption("pending", "Pending"),
            StatusOption("under_review", "Under Review", tone=TONE_REVIEWING),
            StatusOption("acknowledged", "Acknowledged", terminal=True, tone=TONE_ACKNOWLEDGED),
            StatusOption("addressed", "Addressed", terminal=True, tone=TONE_DONE),
            StatusOption("declined", "Declined", terminal=True, tone=TONE_REJECTED),
        ),
    ),
}


def workflow_for(feedback_type: str) -> Workflow:
    try:
        return WORKFLOWS[feedback_type]
    except (KeyError, TypeError):
        raise UnknownWorkflowError(feedback_type) from None


def statuses_for(feedback_type: str) -> tuple[tuple[str, str], ...]:
    """Ordered (value, label) pairs valid for ``feedback_type``."""
    return tuple((o.value, o.label) for o in workflow_for(feedback_type).options)


def validate_status(feedback_type: str, status: str) -> StatusOption:
    """Return the option for ``status`` within the type's workflow or raise InvalidStatusError."""
    return workflow_for(feedback_type).option(status)


def all_status_values() -> tuple[str, ...]:
    """Every distinct status spelling across workflows, in first-seen order."""
    seen: list[str] = []
    for wf in WORKFLOWS.values():
        for value in wf.statuses:
            if value not in seen:
                seen.append(value)
    return tuple(seen)
