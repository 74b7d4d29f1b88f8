"""Services Directory Schemas — categories and service offerings."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fedlink.schemas.user import UserSummary


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    color: str | None = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CategoryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    color: str | None = None


class ServiceCreate(BaseModel):
    category_id: int | None = Field(None, gt=0)
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1, max_length=5000)
    price: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=200)
    remote: bool = True


class ServiceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    category_id: int | None = Field(None, gt=0)
    title: str | None = Field(None, min_length=1, max_length=200)
    description: str | None = Field(None, min_length=1, max_length=5000)
    price: str | None = Field(None, max_length=100)
    location: str | None = Field(None, max_length=200)
    remote: bool | None = None


class ServiceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    category_id: int | None
    title: str
    description: str
    price: str | None
    location: str | None
    remote: bool
    created_at: datetime
    user: UserSummary
    category: CategoryResponse | None = None
