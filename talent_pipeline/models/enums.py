"""
Enumerations shared by models, schemas and services.

Values are stored as plain strings in the database.
"""

from enum import Enum


class PipelineStage(str, Enum):
    """Funnel position of a pipeline entry, in funnel order."""

    SOURCED = "sourced"
    SCREENING = "screening"
    QUALIFIED = "qualified"
    SUBMITTED = "submitted"
    INTERVIEW = "interview"
    OFFER = "offer"
    PLACED = "placed"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


class ActivityAction(str, Enum):
    """Kind of mutation an activity record describes."""

    CREATED = "created"
    STAGE_CHANGE = "stage_change"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"
    NOTE_ADDED = "note_added"
    ASSIGNED = "assigned"
    PRIORITY_CHANGED = "priority_changed"
    SCORECARD_ADDED = "scorecard_added"
    PLACEMENT_CREATED = "placement_created"
    REMOVED = "removed"
    PLACEMENT_UPDATED = "placement_updated"
    INVOICE_RAISED = "invoice_raised"
    INVOICE_PAID = "invoice_paid"
    REBATE_TRIGGERED = "rebate_triggered"
    PLACEMENT_STATUS_CHANGED = "placement_status_changed"


class Recommendation(str, Enum):
    STRONG_HIRE = "strong_hire"
    HIRE = "hire"
    MAYBE = "maybe"
    NO_HIRE = "no_hire"
    STRONG_NO_HIRE = "strong_no_hire"


class InterviewType(str, Enum):
    PHONE = "phone"
    VIDEO = "video"
    IN_PERSON = "in_person"
    ASSESSMENT = "assessment"


class PlacementStatus(str, Enum):
    CONFIRMED = "confirmed"
    STARTED = "started"
    COMPLETED = "completed"
    REBATE = "rebate"


class JobType(str, Enum):
    PERMANENT = "permanent"
    CONTRACT = "contract"
    TEMP_TO_PERM = "temp_to_perm"
    INTERIM = "interim"
