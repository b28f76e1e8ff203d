import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from campussync.api.deps import get_current_user, get_db, require_roles
from campussync.models.group import Group, GroupMembership
from campussync.models.timetable import TimetableGroup
from campussync.models.user import User, UserRole
from campussync.schemas.group import (
    GroupCodeOut,
    GroupCodeToggle,
    GroupCreate,
    GroupJoin,
    GroupJoinOut,
    GroupOut,
    GroupUpdate,
    MemberOut,
    MemberRoleUpdate,
    MemberUser,
)
from campussync.services.group_codes import unused_group_code

router = APIRouter()
logger = logging.getLogger(__name__)

NOT_FOUND_OR_UNAUTHORIZED = "Group not found or unauthorized"


def _group_out(group: Group, **extra) -> GroupOut:
    return GroupOut(
        id=group.id,
        title=group.title,
        description=group.description,
        code=group.code,
        code_active=group.code_active,
        default_role=group.default_role,
        created_by_id=group.created_by_id,
        created_at=group.created_at,
        **extra,
    )


def _owned_group(db: Session, group_id: str, user: User) -> Group:
    group = db.get(Group, group_id)
    if group is None or group.created_by_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND_OR_UNAUTHORIZED)
    return group


def _member_count(db: Session, group_id: str) -> int:
    return db.execute(
        select(func.count()).select_from(GroupMembership).where(GroupMembership.group_id == group_id)
    ).scalar_one()


@router.get("/", response_model=list[GroupOut])
def list_groups(current_user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> list[GroupOut]:
    if current_user.role == UserRole.hod:
        counts = (
            select(GroupMembership.group_id, func.count(GroupMembership.id).label("member_count"))
            .group_by(GroupMembership.group_id)
            .subquery()
        )
        rows = db.execute(
            select(Group, counts.c.member_count)
            .outerjoin(counts, counts.c.group_id == Group.id)
            .where(Group.created_by_id == current_user.id)
            .order_by(Group.created_at.desc())
        ).all()
        return [_group_out(group, member_count=count or 0, created_by_name=current_user.name) for group, count in rows]

    rows = db.execute(
        select(GroupMembership, Group, User.name)
        .join(Group, Group.id == GroupMembership.group_id)
        .outerjoin(User, User.id == Group.created_by_id)
        .where(GroupMembership.user_id == current_user.id)
        .order_by(GroupMembership.joined_at.desc())
    ).all()
    return [
        _group_out(group, member_role=membership.role, membership_id=membership.id, created_by_name=creator_name)
        for membership, group, creator_name in rows
    ]


@router.post("/", response_model=GroupOut, status_code=status.HTTP_201_CREATED)
def create_group(
    payload: GroupCreate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupOut:
    group = Group(
        title=payload.title,
        description=payload.description,
        default_role=payload.default_role,
        code=unused_group_code(db),
        code_active=True,
        created_by_id=current_user.id,
    )
    db.add(group)
    db.commit()
    db.refresh(group)
    logger.info("%s created group %s", current_user.id, group.id)
    return _group_out(group, member_count=0, created_by_name=current_user.name)


@router.post("/join", response_model=GroupJoinOut)
def join_group(
    payload: GroupJoin,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> GroupJoinOut:
    group = db.execute(select(Group).where(Group.code == payload.code)).scalar_one_or_none()
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invalid group code")
    if not group.code_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="This group code is no longer active")
    if group.created_by_id == current_user.id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot join your own group")

    existing = db.execute(
        select(GroupMembership.id).where(
            GroupMembership.group_id == group.id,
            GroupMembership.user_id == current_user.id,
        )
    ).first()
    if existing is not None:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="You are already a member of this group")

    db.add(GroupMembership(group_id=group.id, user_id=current_user.id, role=group.default_role))
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You are already a member of this group",
        ) from exc
    logger.info("User %s joined group %s", current_user.id, group.id)
    return GroupJoinOut(group_id=group.id, group_title=group.title)


@router.get("/{group_id}", response_model=GroupOut)
def get_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> GroupOut:
    group = db.get(Group, group_id)
    if group is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    creator = db.get(User, group.created_by_id)
    creator_name = creator.name if creator else None
    if group.created_by_id == current_user.id:
        return _group_out(group, member_count=_member_count(db, group.id), created_by_name=creator_name)

    membership = db.execute(
        select(GroupMembership).where(
            GroupMembership.group_id == group.id,
            GroupMembership.user_id == current_user.id,
        )
    ).scalar_one_or_none()
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Group not found")
    return _group_out(
        group,
        member_role=membership.role,
        membership_id=membership.id,
        created_by_name=creator_name,
    )


@router.put("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: str,
    payload: GroupUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupOut:
    group = _owned_group(db, group_id, current_user)
    group.title = payload.title
    group.description = payload.description
    group.default_role = payload.default_role
    db.commit()
    db.refresh(group)
    return _group_out(group, member_count=_member_count(db, group.id), created_by_name=current_user.name)


@router.delete("/{group_id}")
def delete_group(
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    group = _owned_group(db, group_id, current_user)
    db.execute(delete(GroupMembership).where(GroupMembership.group_id == group_id))
    db.execute(delete(TimetableGroup).where(TimetableGroup.group_id == group_id))
    db.delete(group)
    db.commit()
    logger.info("%s deleted group %s", current_user.id, group_id)
    return {"success": True}


@router.post("/{group_id}/leave")
def leave_group(
    group_id: str,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
) -> dict:
    membership = db.execute(
        select(GroupMembership).where(
            GroupMembership.group_id == group_id,
            GroupMembership.user_id == current_user.id,
        )
    ).scalar_one_or_none()
    if membership is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="You are not a member of this group")
    db.delete(membership)
    db.commit()
    return {"success": True}


@router.post("/{group_id}/code/regenerate", response_model=GroupCodeOut)
def regenerate_code(
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupCodeOut:
    group = _owned_group(db, group_id, current_user)
    group.code = unused_group_code(db)
    group.code_active = True
    db.commit()
    db.refresh(group)
    return GroupCodeOut(code=group.code, code_active=group.code_active)


@router.put("/{group_id}/code/active", response_model=GroupCodeOut)
def toggle_code(
    group_id: str,
    payload: GroupCodeToggle,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> GroupCodeOut:
    group = _owned_group(db, group_id, current_user)
    group.code_active = payload.active
    db.commit()
    db.refresh(group)
    return GroupCodeOut(code=group.code, code_active=group.code_active)


@router.get("/{group_id}/members", response_model=list[MemberOut])
def list_members(
    group_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> list[MemberOut]:
    _owned_group(db, group_id, current_user)
    rows = db.execute(
        select(GroupMembership, User)
        .join(User, User.id == GroupMembership.user_id)
        .where(GroupMembership.group_id == group_id)
        .order_by(GroupMembership.joined_at.desc(), User.name.asc())
    ).all()
    return [
        MemberOut(
            id=membership.id,
            group_id=membership.group_id,
            user_id=membership.user_id,
            role=membership.role,
            joined_at=membership.joined_at,
            user=MemberUser(id=user.id, name=user.name, email=user.email, role=user.role),
        )
        for membership, user in rows
    ]


def _owned_membership(db: Session, group_id: str, membership_id: str, user: User) -> GroupMembership:
    _owned_group(db, group_id, user)
    membership = db.get(GroupMembership, membership_id)
    if membership is None or membership.group_id != group_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Member not found")
    return membership


@router.put("/{group_id}/members/{membership_id}", response_model=MemberOut)
def update_member_role(
    group_id: str,
    membership_id: str,
    payload: MemberRoleUpdate,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> MemberOut:
    membership = _owned_membership(db, group_id, membership_id, current_user)
    membership.role = payload.role
    db.commit()
    db.refresh(membership)
    return MemberOut(
        id=membership.id,
        group_id=membership.group_id,
        user_id=membership.user_id,
        role=membership.role,
        joined_at=membership.joined_at,
    )


@router.delete("/{group_id}/members/{membership_id}")
def remove_member(
    group_id: str,
    membership_id: str,
    current_user: User = Depends(require_roles(UserRole.hod)),
    db: Session = Depends(get_db),
) -> dict:
    membership = _owned_membership(db, group_id, membership_id, current_user)
    db.delete(membership)
    db.commit()
    return {"success": True}
