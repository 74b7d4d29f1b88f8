"""Profile History Schemas — work experiences and educations.

Invariants:
    - Create schemas reject current=True with an end_date at the boundary;
      ProfileRepository re-checks the merged state on updates
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fedlink.core.enforce_intervals import check_interval
from fedlink.core.errors import ValidationError as DomainValidationError


class _IntervalCreate(BaseModel):
    start_date: datetime
    end_date: datetime | None = None
    current: bool = False
    description: str | None = Field(None, max_length=5000)

    @model_validator(mode="after")
    def validate_interval(self):
        try:
            check_interval(self.start_date, self.end_date, self.current)
        except DomainValidationError as e:
            raise ValueError(e.message)
        return self


class WorkExperienceCreate(_IntervalCreate):
    company: str = Field(min_length=1, max_length=200)
    title: str = Field(min_length=1, max_length=200)
    location: str | None = Field(None, max_length=200)


class WorkExperienceUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    company: str | None = Field(None, min_length=1, max_length=200)
    title: str | None = Field(None, min_length=1, max_length=200)
    location: str | None = Field(None, max_length=200)
    start_date: datetime | None = None
    end_date: datetime | None = None
    current: bool | None = None
    description: str | None = Field(None, max_length=5000)


class WorkExperienceResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    company: str
    title: str
    location: str | None
    start_date: datetime
    end_date: datetime | None
    current: bool
    description: str | None


class EducationCreate(_IntervalCreate):
    school: str = Field(min_length=1, max_length=200)
    degree: str | None = Field(None, max_length=200)
    field_of_study: str | None = Field(None, max_length=200)


class EducationUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    school: str | None = Field(None, min_length=1, max_length=200)
    degree: str | None = Field(None, max_length=200)
    field_of_study: str | None = Field(None, max_length=200)
    start_date: datetime | None = None
    end_date: datetime | None = None
    current: bool | None = None
    description: str | None = Field(None, max_length=5000)


class EducationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    school: str
    degree: str | None
    field_of_study: str | None
    start_date: datetime
    end_date: datetime | None
    current: bool
    description: str | None
