"""Domain Types — enums shared by schemas, storage and the client view layer.

Invariants:
    - All valid states encoded as Enums, no raw string matching

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class FederationStatus(str, Enum):
    """Status of a directed federation edge; maps to `federated_instances.status`."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class RegistrationType(str, Enum):
    """Who may join an instance."""
    OPEN = "open"
    INVITE = "invite"
    ADMIN = "admin"


class ReactionType(str, Enum):
    LIKE = "like"
    CELEBRATE = "celebrate"
    SUPPORT = "support"
    INSIGHTFUL = "insightful"
    SHARE = "share"


class ActivityType(str, Enum):
    """ActivityStreams verbs recorded in the instance activity log."""
    CREATE = "Create"
    FOLLOW = "Follow"
    LIKE = "Like"
    PROFILE_UPDATE = "ProfileUpdate"
    SERVICE_OFFER = "ServiceOffer"


class TimeRange(str, Enum):
    """Analytics window; value of days_in_range drives time series length."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def days_in_range(self) -> int:
        return {"week": 7, "month": 30, "year": 365}[self.value]


class Section(str, Enum):
    """Top-level navigation sections mirrored by the tab selector."""
    HOME = "home"
    PROFILE = "profile"
    SERVICES = "services"
    ADMIN = "admin"
