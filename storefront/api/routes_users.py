from typing import Any, Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.api.deps import get_db
from storefront.core.auth import Identity, get_identity, require_admin, require_identity
from storefront.core.errors import Conflict, Forbidden, InvalidInput, NotFound, UserNotFound
from storefront.db.models import Order, User
from storefront.schemas import (
    DeletedUserEnvelope,
    UserCreate,
    UserEnvelope,
    UserListEnvelope,
    UserRead,
    UserUpdate,
)
from storefront.security.utils import hash_password, now_utc

router = APIRouter()  # main.py mounts at /users


def _get_target(db: Session, identity: Identity, email: str) -> User:
    """Admins may address any account, everyone else only their own.

    A non-admin asking for another email gets 403 whether or not that account
    exists.
    """
    email = email.strip().lower()
    if identity.is_admin:
        user = db.query(User).filter(User.email == email).first()
    else:
        user = db.get(User, identity.subject_id)
        if user is None or user.email != email:
            raise Forbidden("Access denied")
    if not user:
        raise UserNotFound(email)
    return user


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user(payload: UserCreate, db: Session = Depends(get_db),
                identity: Optional[Identity] = Depends(get_identity)) -> Any:
    if payload.role == "admin" and not (identity and identity.is_admin):
        raise Forbidden("Only admins can create admin accounts")
    if db.query(User).filter(User.email == str(payload.email)).first():
        raise InvalidInput("User already exists")
    if db.query(User).filter(User.user_name == payload.user_name).first():
        raise InvalidInput("User name already taken")

    user = User(
        user_name=payload.user_name,
        email=str(payload.email),
        password_hash=hash_password(payload.password),
        role=payload.role,
        address=payload.address,
        created_at=now_utc(),
        updated_at=now_utc(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"message": "User created successfully", "user": UserRead.model_validate(user)}


@router.get("", response_model=UserListEnvelope)
def list_users(db: Session = Depends(get_db), _=Depends(require_admin)):
    users = db.execute(select(User).order_by(User.id)).scalars().all()
    if not users:
        raise NotFound("No users found")
    return {"message": "Users retrieved successfully", "data": users, "count": len(users)}


@router.get("/{email}", response_model=UserEnvelope)
def get_user(email: str, db: Session = Depends(get_db), identity: Identity = Depends(require_identity)):
    user = _get_target(db, identity, email)
    return {"message": "User retrieved successfully", "data": user}


@router.put("/{email}", response_model=UserEnvelope)
def update_user(email: str, payload: UserUpdate, db: Session = Depends(get_db),
                identity: Identity = Depends(require_identity)):
    user = _get_target(db, identity, email)
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if "role" in changes and changes["role"] != user.role and not identity.is_admin:
        raise Forbidden("Only admins can change roles")
    if "email" in changes:
        changes["email"] = str(changes["email"])
        if changes["email"] != user.email and db.query(User).filter(User.email == changes["email"]).first():
            raise Conflict("Email is already taken by another user")
    if "user_name" in changes and changes["user_name"] != user.user_name:
        if db.query(User).filter(User.user_name == changes["user_name"]).first():
            raise Conflict("User name is already taken by another user")

    for k, v in changes.items():
        setattr(user, k, v)
    user.updated_at = now_utc()
    db.add(user)
    db.commit()
    db.refresh(user)
    return {"message": "User updated successfully", "data": user}


@router.delete("/{email}", response_model=DeletedUserEnvelope)
def delete_user(email: str, db: Session = Depends(get_db), identity: Identity = Depends(require_identity)):
    user = _get_target(db, identity, email)
    if db.query(Order).filter(Order.owner_id == user.id).first():
        raise Conflict("User has orders and cannot be deleted")
    deleted = {"id": user.id, "user_name": user.user_name, "email": user.email}
    db.delete(user)
    db.commit()
    return {"message": "User deleted successfully", "data": deleted}
