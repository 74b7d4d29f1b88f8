"""Profile Repository — work experiences and educations.

Invariants:
    - Inserts and updates run the open-interval check (current + end_date rejected);
      updates are checked on the merged stored + patch state
    - Lists are ordered by start_date, newest first
"""

from typing import TypeVar

from sqlalchemy import select

from fedlink.core.enforce_intervals import check_interval, merged_interval
from fedlink.models.profile import Education, WorkExperience
from fedlink.repositories.base import Repository, apply_patch
from fedlink.schemas.profile import (
    EducationCreate, EducationUpdate, WorkExperienceCreate, WorkExperienceUpdate,
)

HistoryT = TypeVar("HistoryT", WorkExperience, Education)

# Columns a patch may set to null; everything else ignores explicit nulls.
_NULLABLE = frozenset({
    "location", "end_date", "description", "degree", "field_of_study",
})


def _clean_patch(data) -> dict:
    return {
        k: v for k, v in data.model_dump(exclude_unset=True).items()
        if v is not None or k in _NULLABLE
    }


class ProfileRepository(Repository):
    async def _create(self, model: type[HistoryT], user_id: int, data) -> HistoryT:
        """Insert a history row for user_id after validating its interval."""
        check_interval(data.start_date, data.end_date, data.current)
        return await self.add(model(user_id=user_id, **data.model_dump()))

    async def _list(self, model: type[HistoryT], user_id: int) -> list[HistoryT]:
        """A user's rows, most recent start_date first."""
        result = await self.db.execute(
            select(model).where(model.user_id == user_id)
            .order_by(model.start_date.desc(), model.id.desc()),
        )
        return list(result.scalars().all())

    async def _update(self, model: type[HistoryT], row_id: int, data, label: str) -> HistoryT:
        """Patch a row; the interval rule is checked on stored values merged with the patch."""
        row = await self.fetch_or_404(model, row_id, label)
        patch = _clean_patch(data)
        check_interval(*merged_interval(row, patch))
        apply_patch(row, patch)
        await self.commit()
        return row

    # ─── Work experience ────────────────────────────────────────

    async def create_work_experience(
        self, user_id: int, data: WorkExperienceCreate,
    ) -> WorkExperience:
        return await self._create(WorkExperience, user_id, data)

    async def list_work_experiences_by_user(self, user_id: int) -> list[WorkExperience]:
        return await self._list(WorkExperience, user_id)

    async def get_work_experience(self, row_id: int) -> WorkExperience:
        return await self.fetch_or_404(WorkExperience, row_id, "WorkExperience")

    async def update_work_experience(
        self, row_id: int, data: WorkExperienceUpdate,
    ) -> WorkExperience:
        return await self._update(WorkExperience, row_id, data, "WorkExperience")

    async def delete_work_experience(self, row_id: int) -> None:
        await self.remove(await self.get_work_experience(row_id))

    # ─── Education ──────────────────────────────────────────────

    async def create_education(self, user_id: int, data: EducationCreate) -> Education:
        return await self._create(Education, user_id, data)

    async def list_educations_by_user(self, user_id: int) -> list[Education]:
        return await self._list(Education, user_id)

    async def get_education(self, row_id: int) -> Education:
        return await self.fetch_or_404(Education, row_id, "Education")

    async def update_education(self, row_id: int, data: EducationUpdate) -> Education:
        return await self._update(Education, row_id, data, "Education")

    async def delete_education(self, row_id: int) -> None:
        await self.remove(await self.get_education(row_id))
