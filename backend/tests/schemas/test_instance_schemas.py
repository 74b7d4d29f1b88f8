"""Instance & Feed Schemas — typed config blocks, enums and inbox passthrough."""

import pytest
from pydantic import ValidationError

from fedlink.core.domain_types import RegistrationType
from fedlink.schemas.instance import FederationStatusUpdate, InboxActivity, InstanceCreate
from fedlink.schemas.post import PostCreate, ReactionSet
from fedlink.schemas.service import CategoryCreate
from fedlink.schemas.user import IdentityClaims


def test_instance_defaults_fill_config_blocks():
    """Omitted config blocks get their defaults."""
    body = InstanceCreate(name="Makers")
    assert body.registration_type == RegistrationType.OPEN
    assert body.federation_rules.auto_share is True
    dumped = body.model_dump(mode="json")
    assert dumped["content_moderation"]["version"] == 1


def test_instance_rejects_unknown_config_keys():
    """Unknown keys in a config block are rejected."""
    with pytest.raises(ValidationError):
        InstanceCreate(name="Makers", required_fields={"shoe_size": True})


def test_federation_status_must_be_known():
    """Only pending, approved and rejected are accepted."""
    with pytest.raises(ValidationError):
        FederationStatusUpdate(status="active")


def test_reaction_type_must_be_known():
    """Reaction types outside the enum are rejected."""
    assert ReactionSet(type="celebrate").type.value == "celebrate"
    with pytest.raises(ValidationError):
        ReactionSet(type="angry")


def test_blank_post_rejected():
    """Whitespace-only post content is rejected."""
    with pytest.raises(ValidationError):
        PostCreate(content="   ")


def test_category_color_must_be_hex():
    """Category colors must be #RRGGBB."""
    assert CategoryCreate(name="Design", color="#AABBCC").color == "#AABBCC"
    with pytest.raises(ValidationError):
        CategoryCreate(name="Design", color="blue")


def test_inbox_keeps_unknown_members():
    """Inbox payloads keep members the schema does not name."""
    incoming = InboxActivity.model_validate(
        {"type": "Follow", "actor": "https://a/u/1", "summary": "hi"},
    )
    assert incoming.model_dump(exclude_none=True)["summary"] == "hi"


def test_identity_claims_default_email():
    """Claims without an email get username@example.com."""
    assert IdentityClaims(username="ada").resolved_email() == "ada@example.com"
    with pytest.raises(ValidationError):
        IdentityClaims(username="a b")
