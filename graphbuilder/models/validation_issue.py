"""Data model for validator findings."""

from pydantic import BaseModel


class ValidationIssue(BaseModel):
    """a non-fatal problem that blocks export but not editing."""

    code: str  # stable machine token, e.g. "ambiguous_entry"
    message: str
    node_id: str | None = None
    edge_id: str | None = None
