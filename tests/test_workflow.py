"""Tests for the feedback status workflow registry."""
import pytest

from app.crm.errors import InvalidStatusError, UnknownWorkflowError
from app.crm.modules.feedback.workflow import (
    FEEDBACK_TYPES,
    WORKFLOWS,
    all_status_values,
    statuses_for,
    validate_status,
    workflow_for,
)


def test_bug_report_order():
    assert [v for v, _ in statuses_for("bug_report")] == [
        "pending",
        "under_investigation",
        "in_progress",
        "fixed",
        "wont_fix",
        "cannot_reproduce",
    ]


def test_feature_request_order():
    assert [v for v, _ in statuses_for("feature_request")] == [
        "pending",
        "under_review",
        "planned",
        "in_development",
        "completed",
        "declined",
    ]


def test_general_feedback_order():
    assert [v for v, _ in statuses_for("general_feedback")] == [
        "pending",
        "under_review",
        "acknowledged",
        "addressed",
        "declined",
    ]


def test_labels():
    assert dict(statuses_for("bug_report"))["wont_fix"] == "Won't Fix"
    assert dict(statuses_for("feature_request"))["in_development"] == "In Development"


@pytest.mark.parametrize("bad", ["", "bug", "BUG_REPORT", None, "all"])
def test_unknown_type_fails_loudly(bad):
    with pytest.raises(UnknownWorkflowError):
        statuses_for(bad)


def test_every_type_has_a_workflow_starting_pending():
    for t in FEEDBACK_TYPES:
        assert workflow_for(t).initial == "pending"
    assert set(WORKFLOWS) == set(FEEDBACK_TYPES)


def test_terminal_siblings():
    wf = workflow_for("bug_report")
    assert [s for s in wf.statuses if wf.is_terminal(s)] == ["fixed", "wont_fix", "cannot_reproduce"]
    assert not wf.is_terminal("pending")
    assert workflow_for("general_feedback").is_terminal("declined")


def test_cross_workflow_status_rejected():
    validate_status("bug_report", "fixed")
    with pytest.raises(InvalidStatusError) as ei:
        validate_status("feature_request", "fixed")
    assert "completed" in ei.value.allowed
    with pytest.raises(InvalidStatusError):
        validate_status("bug_report", "declined")
    with pytest.raises(InvalidStatusError):
        validate_status("general_feedback", "planned")


def test_all_status_values_deduplicates_shared_spellings():
    values = all_status_values()
    assert values.count("pending") == 1
    assert values.count("declined") == 1
    assert len(values) == 13
