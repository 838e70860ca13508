"""
Error taxonomy for the triage and filtering core.

Every error here is recoverable: callers report it and carry on with the
last known-good state. Nothing in this package retries on its own.
"""
from __future__ import annotations


class CrmError(RuntimeError):
    status_code = 500
    code = "crm_error"

    def to_dict(self) -> dict:
        return {"error": self.code, "message": str(self)}


class UnknownWorkflowError(CrmError):
    """A feedback type outside the known set reached the workflow registry."""

    status_code = 400
    code = "unknown_workflow"

    def __init__(self, feedback_type: object):
        super().__init__(f"No status workflow for feedback type {feedback_type!r}.")
        self.feedback_type = feedback_type


class InvalidStatusError(CrmError):
    status_code = 400
    code = "invalid_status"

    def __init__(self, status: object, feedback_type: str, allowed: tuple[str, ...]):
        super().__init__(
            f"Invalid status {status!r} for {feedback_type}. Must be one of: {', '.join(allowed)}"
        )
        self.status = status
        self.feedback_type = feedback_type
        self.allowed = allowed


class RecordNotFoundError(CrmError):
    status_code = 404
    code = "not_found"

    def __init__(self, collection: str, record_id: object):
        super().__init__(f"{collection} record {record_id!r} not found.")
        self.collection = collection
        self.record_id = record_id


class AdapterIOError(CrmError):
    """Store failure during a fetch or a write."""

    status_code = 503
    code = "store_unavailable"
