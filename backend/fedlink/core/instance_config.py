"""Instance Configuration Blocks — versioned, validated shapes for the JSON columns.

Invariants:
    - content_moderation, required_fields and federation_rules are validated here before
      they reach the database; unknown keys are rejected (extra="forbid")
    - Every block carries a schema version; stored blocks without one are read as version 1
    - federation_scope decides which domain list applies: allowlist -> allowed_domains,
      blocklist -> blocked_domains, all -> neither

Design Decisions:
    - Pydantic models instead of pass-through dicts: the columns stay JSON for storage,
      the boundary is typed
    - Domains normalized to lowercase and stripped; empty entries dropped
"""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FederationScope(str, Enum):
    ALL = "all"
    ALLOWLIST = "allowlist"
    BLOCKLIST = "blocklist"


class _ConfigBlock(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: Literal[1] = 1


class ContentModeration(_ConfigBlock):
    enabled: bool = True
    keywords: list[str] = Field(default_factory=list)

    @field_validator("keywords")
    @classmethod
    def normalize_keywords(cls, v: list[str]) -> list[str]:
        return [k.strip().lower() for k in v if k.strip()]

    def flags(self, text: str) -> list[str]:
        """Keywords present in text (empty when moderation is disabled)."""
        if not self.enabled:
            return []
        lowered = text.lower()
        return [k for k in self.keywords if k in lowered]


class RequiredFields(_ConfigBlock):
    first_name: bool = True
    last_name: bool = False
    bio: bool = False
    work_history: bool = False
    skills: bool = False


class FederationRules(_ConfigBlock):
    auto_share: bool = True
    require_approval: bool = False
    federation_scope: FederationScope = FederationScope.ALL
    allowed_domains: list[str] = Field(default_factory=list)
    blocked_domains: list[str] = Field(default_factory=list)

    @field_validator("allowed_domains", "blocked_domains")
    @classmethod
    def normalize_domains(cls, v: list[str]) -> list[str]:
        return [d.strip().lower() for d in v if d.strip()]

    @model_validator(mode="after")
    def check_scope_lists(self):
        if self.federation_scope == FederationScope.ALLOWLIST and self.blocked_domains:
            raise ValueError("allowlist scope does not use blocked_domains")
        if self.federation_scope == FederationScope.BLOCKLIST and self.allowed_domains:
            raise ValueError("blocklist scope does not use allowed_domains")
        return self

    def permits(self, domain: str | None) -> bool:
        """Whether federation with an instance at `domain` is allowed by these rules."""
        if self.federation_scope == FederationScope.ALL:
            return True
        normalized = (domain or "").strip().lower()
        if self.federation_scope == FederationScope.ALLOWLIST:
            return normalized in self.allowed_domains
        return normalized not in self.blocked_domains


def load_content_moderation(raw: dict | None) -> ContentModeration:
    return ContentModeration.model_validate(raw or {})


def load_required_fields(raw: dict | None) -> RequiredFields:
    return RequiredFields.model_validate(raw or {})


def load_federation_rules(raw: dict | None) -> FederationRules:
    return FederationRules.model_validate(raw or {})
