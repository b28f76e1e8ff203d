from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from campussync.models.group import GroupRole
from campussync.models.user import UserRole
from campussync.schemas.common import strip_required


class GroupBase(BaseModel):
    title: str = Field(max_length=200)
    description: str = Field(max_length=2000)
    default_role: GroupRole

    @field_validator("title")
    @classmethod
    def validate_title(cls, value: str) -> str:
        return strip_required(value, "Group title is required")

    @field_validator("description")
    @classmethod
    def validate_description(cls, value: str) -> str:
        return strip_required(value, "Group description is required")


class GroupCreate(GroupBase):
    pass


class GroupUpdate(GroupBase):
    pass


class GroupOut(BaseModel):
    id: str
    title: str
    description: str
    code: str
    code_active: bool
    default_role: GroupRole
    created_by_id: str
    created_by_name: str | None = None
    created_at: datetime | None = None
    member_count: int | None = None
    member_role: GroupRole | None = None
    membership_id: str | None = None


class GroupJoin(BaseModel):
    code: str = Field(max_length=64)

    @field_validator("code")
    @classmethod
    def normalize_code(cls, value: str) -> str:
        return strip_required(value, "Group code is required").upper()


class GroupJoinOut(BaseModel):
    success: bool = True
    group_id: str
    group_title: str


class GroupCodeOut(BaseModel):
    code: str
    code_active: bool


class GroupCodeToggle(BaseModel):
    active: bool


class MemberRoleUpdate(BaseModel):
    role: GroupRole


class MemberUser(BaseModel):
    id: str
    name: str
    email: str
    role: UserRole


class MemberOut(BaseModel):
    id: str
    group_id: str
    user_id: str
    role: GroupRole
    joined_at: datetime | None = None
    user: MemberUser | None = None
