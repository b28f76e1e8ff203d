from pydantic import BaseModel, Field, field_validator


class SlotTypeWithPreference(BaseModel):
    id: str
    name: str
    enabled: bool


class BatchWithPreference(BaseModel):
    id: str
    name: str
    selected: bool


class StudentPreferences(BaseModel):
    slot_types: list[SlotTypeWithPreference] = Field(default_factory=list)
    batches: list[BatchWithPreference] = Field(default_factory=list)


class SlotTypePreferenceUpdate(BaseModel):
    enabled: bool


class BatchPreferencesUpdate(BaseModel):
    batch_ids: list[str] = Field(default_factory=list, max_length=500)

    @field_validator("batch_ids")
    @classmethod
    def dedupe_batch_ids(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(item.strip() for item in value if item.strip()))
