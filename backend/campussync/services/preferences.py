from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from campussync.core.exceptions import ResourceNotFoundError, ValidationFailedError
from campussync.models.batch import Batch
from campussync.models.preference import BatchPreference, SlotTypePreference
from campussync.models.slot_type import SlotType
from campussync.models.timetable import TimeSlot
from campussync.schemas.preference import BatchWithPreference, SlotTypeWithPreference, StudentPreferences


@dataclass(frozen=True)
class ActivePreferences:
    # None means no filter on that dimension.
    enabled_slot_type_ids: frozenset[str] | None = None
    selected_batch_ids: frozenset[str] | None = None

    def allows(self, slot: TimeSlot) -> bool:
        if self.enabled_slot_type_ids is not None and slot.slot_type_id not in self.enabled_slot_type_ids:
            return False
        # Slots without a batch are shared by every batch.
        if self.selected_batch_ids is not None and slot.batch_id and slot.batch_id not in self.selected_batch_ids:
            return False
        return True


def active_preferences(db: Session, user_id: str) -> ActivePreferences:
    slot_type_prefs = {
        pref.slot_type_id: pref.enabled
        for pref in db.execute(select(SlotTypePreference).where(SlotTypePreference.user_id == user_id)).scalars()
    }
    enabled: frozenset[str] | None = None
    if slot_type_prefs:
        all_ids = db.execute(select(SlotType.id)).scalars()
        enabled = frozenset(slot_type_id for slot_type_id in all_ids if slot_type_prefs.get(slot_type_id, True))

    batch_ids = list(db.execute(select(BatchPreference.batch_id).where(BatchPreference.user_id == user_id)).scalars())
    selected = frozenset(batch_ids) if batch_ids else None
    return ActivePreferences(enabled_slot_type_ids=enabled, selected_batch_ids=selected)


def student_preferences(db: Session, user_id: str) -> StudentPreferences:
    slot_type_prefs = {
        pref.slot_type_id: pref.enabled
        for pref in db.execute(select(SlotTypePreference).where(SlotTypePreference.user_id == user_id)).scalars()
    }
    selected_batches = set(
        db.execute(select(BatchPreference.batch_id).where(BatchPreference.user_id == user_id)).scalars()
    )
    slot_types = [
        SlotTypeWithPreference(id=item.id, name=item.name, enabled=slot_type_prefs.get(item.id, True))
        for item in db.execute(select(SlotType).order_by(SlotType.name.asc())).scalars()
    ]
    batches = [
        BatchWithPreference(id=item.id, name=item.name, selected=item.id in selected_batches)
        for item in db.execute(select(Batch).order_by(Batch.name.asc())).scalars()
    ]
    return StudentPreferences(slot_types=slot_types, batches=batches)


def set_slot_type_preference(db: Session, user_id: str, slot_type_id: str, enabled: bool) -> SlotTypePreference:
    if db.get(SlotType, slot_type_id) is None:
        raise ResourceNotFoundError("Slot type", slot_type_id)
    pref = db.execute(
        select(SlotTypePreference).where(
            SlotTypePreference.user_id == user_id,
            SlotTypePreference.slot_type_id == slot_type_id,
        )
    ).scalar_one_or_none()
    if pref is None:
        pref = SlotTypePreference(user_id=user_id, slot_type_id=slot_type_id, enabled=enabled)
        db.add(pref)
    else:
        pref.enabled = enabled
    return pref


def replace_batch_preferences(db: Session, user_id: str, batch_ids: list[str]) -> None:
    """Replace the selected batches; an empty list removes the batch filter."""
    if batch_ids:
        known = set(db.execute(select(Batch.id).where(Batch.id.in_(batch_ids))).scalars())
        unknown = [batch_id for batch_id in batch_ids if batch_id not in known]
        if unknown:
            raise ValidationFailedError("Unknown batch ids", details={"batch_ids": unknown})
    db.execute(delete(BatchPreference).where(BatchPreference.user_id == user_id))
    for batch_id in dict.fromkeys(batch_ids):
        db.add(BatchPreference(user_id=user_id, batch_id=batch_id))
