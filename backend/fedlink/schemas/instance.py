"""Instance Schemas — instance settings, federation edges, activities, inbox payloads.

Invariants:
    - JSON configuration blocks are typed (core/instance_config), never raw dicts
    - Inbox activities require a `type`; everything else is kept verbatim in the payload
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from fedlink.core.domain_types import FederationStatus, RegistrationType, TimeRange
from fedlink.core.instance_config import ContentModeration, FederationRules, RequiredFields
from fedlink.schemas.user import UserSummary

DOMAIN_PATTERN = r"^[A-Za-z0-9.-]+(:\d+)?$"


class InstanceCreate(BaseModel):
    name: str = Field(min_length=2, max_length=100)
    description: str | None = Field(None, max_length=2000)
    domain: str | None = Field(None, pattern=DOMAIN_PATTERN, max_length=253)
    logo: str | None = Field(None, max_length=2000)
    registration_type: RegistrationType = RegistrationType.OPEN
    content_moderation: ContentModeration = Field(default_factory=ContentModeration)
    required_fields: RequiredFields = Field(default_factory=RequiredFields)
    federation_rules: FederationRules = Field(default_factory=FederationRules)


class InstanceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=100)
    description: str | None = Field(None, max_length=2000)
    domain: str | None = Field(None, pattern=DOMAIN_PATTERN, max_length=253)
    logo: str | None = Field(None, max_length=2000)
    registration_type: RegistrationType | None = None
    content_moderation: ContentModeration | None = None
    required_fields: RequiredFields | None = None
    federation_rules: FederationRules | None = None
    active: bool | None = None


class InstanceSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    domain: str | None = None
    logo: str | None = None


class InstanceResponse(InstanceSummary):
    description: str | None
    admin_id: int
    registration_type: RegistrationType
    content_moderation: ContentModeration
    required_fields: RequiredFields
    federation_rules: FederationRules
    active: bool
    created_at: datetime


class FederationCreate(BaseModel):
    fed_with_instance_id: int = Field(gt=0)


class FederationStatusUpdate(BaseModel):
    status: FederationStatus


class FederationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    instance_id: int
    fed_with_instance_id: int
    status: FederationStatus
    created_at: datetime
    fed_with_instance: InstanceSummary


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    instance_id: int
    type: str
    actor_id: int | None
    object_id: str | None
    target_id: str | None
    payload: dict
    created_at: datetime
    actor: UserSummary | None = None


class RecentActivityResponse(ActivityResponse):
    instance: InstanceSummary


class InboxActivity(BaseModel):
    """Incoming ActivityStreams object; unknown members are preserved."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    type: str = Field(min_length=1, max_length=50)
    id: str | None = None
    actor: str | None = None
    object: Any = None
    target: Any = None


class AnalyticsQuery(BaseModel):
    time_range: TimeRange = TimeRange.WEEK
