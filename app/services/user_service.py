"""User Service - Business Logic Layer"""

import logging
from typing import List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictError, NotFoundError
from app.core.security import get_password_hash, verify_password
from app.models.enums import EmploymentStatus, UserRole
from app.models.user import User
from app.schemas.user import UserCreate, UserUpdate

logger = logging.getLogger(__name__)


class UserService:
    """Service layer for employee accounts"""

    @staticmethod
    async def get_user_by_id(db: AsyncSession, user_id: UUID) -> Optional[User]:
        """
        Get user by ID.

        Args:
            db: Database session
            user_id: User ID

        Returns:
            User or None if not found
        """
        result = await db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    @staticmethod
    async def get_users(
        db: AsyncSession,
        skip: int = 0,
        limit: int = 100,
        role: Optional[UserRole] = None,
        employment_status: Optional[EmploymentStatus] = None,
        search: Optional[str] = None,
    ) -> Tuple[List[User], int]:
        """
        Get paginated list of users.

        Returns:
            Tuple of (users list, total count)
        """
        filters = []
        if role:
            filters.append(User.role == role)
        if employment_status:
            filters.append(User.employment_status == employment_status)
        if search:
            pattern = f"%{search}%"
            filters.append(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

        total = await db.scalar(select(func.count(User.id)).where(*filters))
        result = await db.execute(
            select(User)
            .where(*filters)
            .order_by(User.name)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all()), total or 0

    @staticmethod
    async def create_user(db: AsyncSession, user_in: UserCreate) -> User:
        if await UserService.get_user_by_email(db, user_in.email):
            raise ConflictError("이미 등록된 이메일입니다", code="EMAIL_EXISTS")

        data = user_in.model_dump(exclude={"password"})
        data["email"] = data["email"].lower()
        db_user = User(**data, hashed_password=get_password_hash(user_in.password))
        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)

        logger.info("User created", extra={"user_id": str(db_user.id), "role": db_user.role.value})
        return db_user

    @staticmethod
    async def update_user(db: AsyncSession, user_id: UUID, user_update: UserUpdate) -> User:
        db_user = await UserService.get_user_by_id(db, user_id)
        if not db_user:
            raise NotFoundError("사용자를 찾을 수 없습니다")

        update_data = user_update.model_dump(exclude_unset=True)
        if "email" in update_data and update_data["email"]:
            update_data["email"] = update_data["email"].lower()
            existing = await UserService.get_user_by_email(db, update_data["email"])
            if existing and existing.id != user_id:
                raise ConflictError("이미 등록된 이메일입니다", code="EMAIL_EXISTS")
        if "password" in update_data:
            update_data["hashed_password"] = get_password_hash(update_data.pop("password"))
        if update_data.get("employment_status") is not None:
            update_data["is_active"] = update_data["employment_status"] == EmploymentStatus.ACTIVE

        for field, value in update_data.items():
            setattr(db_user, field, value)

        await db.commit()
        await db.refresh(db_user)
        return db_user

    @staticmethod
    async def deactivate_user(db: AsyncSession, user_id: UUID) -> User:
        """Mark an employee as left; the row stays for audit references."""
        db_user = await UserService.get_user_by_id(db, user_id)
        if not db_user:
            raise NotFoundError("사용자를 찾을 수 없습니다")

        db_user.is_active = False
        db_user.employment_status = EmploymentStatus.INACTIVE
        await db.commit()
        await db.refresh(db_user)

        logger.info("User deactivated", extra={"user_id": str(user_id)})
        return db_user

    @staticmethod
    async def authenticate_user(db: AsyncSession, email: str, password: str) -> Optional[User]:
        """
        Authenticate user with email and password.

        Returns:
            User if authenticated, None otherwise
        """
        user = await UserService.get_user_by_email(db, email)
        if not user:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        if not user.is_active:
            return None
        return user
