from typing import Optional

from motor.motor_asyncio import AsyncIOMotorDatabase


class HierarchyValidator:
    """
    Verifies parent/child containment across
    Vertical -> Batch -> Module -> Week -> Lecture

    Every check is a single existence lookup; a mismatch is reported
    as False, never raised.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def validate_batch_belongs_to_vertical(self, batch_id: str, vertical_id: str) -> bool:
        batch = await self.db.batches.find_one({"batch_id": batch_id, "vertical_id": vertical_id})
        return batch is not None

    async def validate_module_belongs_to_batch(self, module_id: str, batch_id: str) -> bool:
        module = await self.db.modules.find_one({"module_id": module_id, "batch_id": batch_id})
        return module is not None

    async def validate_week_belongs_to_module(self, week_id: str, module_id: str) -> bool:
        week = await self.db.weeks.find_one({"week_id": week_id, "module_id": module_id})
        return week is not None

    async def validate_lecture_belongs_to_week(self, lecture_id: str, week_id: str) -> bool:
        lecture = await self.db.lectures.find_one({"lecture_id": lecture_id, "week_id": week_id})
        return lecture is not None

    async def validate_full_hierarchy(
        self,
        vertical_id: Optional[str] = None,
        batch_id: Optional[str] = None,
        module_id: Optional[str] = None,
        week_id: Optional[str] = None,
        lecture_id: Optional[str] = None,
    ) -> bool:
        """
        True iff every adjacent pair present in the input is a real
        parent/child link. Missing levels are skipped.
        """
        # Leaf to root, stop at the first broken link
        if lecture_id and week_id:
            if not await self.validate_lecture_belongs_to_week(lecture_id, week_id):
                return False

        if week_id and module_id:
            if not await self.validate_week_belongs_to_module(week_id, module_id):
                return False

        if module_id and batch_id:
            if not await self.validate_module_belongs_to_batch(module_id, batch_id):
                return False

        if batch_id and vertical_id:
            if not await self.validate_batch_belongs_to_vertical(batch_id, vertical_id):
                return False

        return True
