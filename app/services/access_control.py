"""Module / page access gating"""

import logging
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.exceptions import NotFoundError
from app.models.access import Module, ModulePage, UserModuleAccess, UserPageAccess
from app.models.user import User
from app.schemas.access import (
    ModulePageResponse, ModuleWithPages, UserModuleWithAccess, UserPageWithAccess,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CapabilityTable:
    """
    Snapshot of what one user may open.

    Admins bypass the per-user flags but never see inactive modules or pages.
    A page is reachable only when its module is reachable too.
    """
    is_admin: bool = False
    active_modules: FrozenSet[str] = field(default_factory=frozenset)
    active_pages: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)
    enabled_modules: FrozenSet[str] = field(default_factory=frozenset)
    enabled_pages: FrozenSet[Tuple[str, str]] = field(default_factory=frozenset)

    def can_access_module(self, module_code: str) -> bool:
        if module_code not in self.active_modules:
            return False
        return self.is_admin or module_code in self.enabled_modules

    def can_access_page(self, module_code: str, page_code: str) -> bool:
        if not self.can_access_module(module_code):
            return False
        key = (module_code, page_code)
        if key not in self.active_pages:
            return False
        return self.is_admin or key in self.enabled_pages


class AccessService:
    """Service layer for module/page access flags"""

    @staticmethod
    async def load_capabilities(db: AsyncSession, user: User) -> CapabilityTable:
        modules = (await db.execute(select(Module.id, Module.code).where(Module.is_active == True))).all()
        module_codes: Dict[UUID, str] = {row.id: row.code for row in modules}

        pages = (await db.execute(
            select(ModulePage.id, ModulePage.module_id, ModulePage.code).where(ModulePage.is_active == True)
        )).all()
        page_keys: Dict[UUID, Tuple[str, str]] = {
            row.id: (module_codes[row.module_id], row.code)
            for row in pages
            if row.module_id in module_codes
        }

        enabled_module_ids = (await db.execute(
            select(UserModuleAccess.module_id).where(
                UserModuleAccess.user_id == user.id,
                UserModuleAccess.is_enabled == True,
            )
        )).scalars().all()
        enabled_page_ids = (await db.execute(
            select(UserPageAccess.page_id).where(
                UserPageAccess.user_id == user.id,
                UserPageAccess.is_enabled == True,
            )
        )).scalars().all()

        return CapabilityTable(
            is_admin=user.is_admin,
            active_modules=frozenset(module_codes.values()),
            active_pages=frozenset(page_keys.values()),
            enabled_modules=frozenset(module_codes[mid] for mid in enabled_module_ids if mid in module_codes),
            enabled_pages=frozenset(page_keys[pid] for pid in enabled_page_ids if pid in page_keys),
        )

    @staticmethod
    async def get_all_modules(db: AsyncSession) -> List[Module]:
        result = await db.execute(
            select(Module).options(selectinload(Module.pages)).order_by(Module.sort_order)
        )
        return list(result.scalars().all())

    @staticmethod
    async def get_accessible_modules(db: AsyncSession, user: User) -> List[ModuleWithPages]:
        """Active modules (with their reachable pages) the user can open, for the sidebar."""
        caps = await AccessService.load_capabilities(db, user)
        modules = await AccessService.get_all_modules(db)

        accessible: List[ModuleWithPages] = []
        for module in modules:
            if not caps.can_access_module(module.code):
                continue
            pages = [
                ModulePageResponse.model_validate(page)
                for page in module.pages
                if caps.can_access_page(module.code, page.code)
            ]
            row = ModuleWithPages.model_validate(module, from_attributes=True)
            accessible.append(row.model_copy(update={"pages": pages}))
        return accessible

    @staticmethod
    async def get_user_module_access(db: AsyncSession, user_id: UUID) -> List[UserModuleWithAccess]:
        """Every module with the user's flag; missing rows read as disabled."""
        modules = (await db.execute(select(Module).order_by(Module.sort_order))).scalars().all()
        rows = (await db.execute(
            select(UserModuleAccess).where(UserModuleAccess.user_id == user_id)
        )).scalars().all()
        by_module = {row.module_id: row for row in rows}

        items = []
        for module in modules:
            access = by_module.get(module.id)
            items.append(UserModuleWithAccess(
                id=module.id,
                code=module.code,
                name=module.name,
                description=module.description,
                icon=module.icon,
                href=module.href,
                sort_order=module.sort_order,
                is_active=module.is_active,
                access_id=access.id if access else None,
                is_enabled=access.is_enabled if access else False,
                user_id=user_id,
            ))
        return items

    @staticmethod
    async def get_user_page_access(
        db: AsyncSession, user_id: UUID, module_id: Optional[UUID] = None
    ) -> List[UserPageWithAccess]:
        query = select(ModulePage).order_by(ModulePage.sort_order)
        if module_id:
            query = query.where(ModulePage.module_id == module_id)
        pages = (await db.execute(query)).scalars().all()
        rows = (await db.execute(
            select(UserPageAccess).where(UserPageAccess.user_id == user_id)
        )).scalars().all()
        by_page = {row.page_id: row for row in rows}

        items = []
        for page in pages:
            access = by_page.get(page.id)
            base = ModulePageResponse.model_validate(page).model_dump()
            items.append(UserPageWithAccess(
                **base,
                access_id=access.id if access else None,
                is_enabled=access.is_enabled if access else False,
                user_id=user_id,
            ))
        return items

    @staticmethod
    async def toggle_module_access(
        db: AsyncSession, user_id: UUID, module_id: UUID, is_enabled: bool
    ) -> UserModuleAccess:
        """Upsert the (user, module) flag."""
        if not await db.get(User, user_id):
            raise NotFoundError("사용자를 찾을 수 없습니다")
        if not await db.get(Module, module_id):
            raise NotFoundError("모듈을 찾을 수 없습니다")

        result = await db.execute(
            select(UserModuleAccess).where(
                UserModuleAccess.user_id == user_id,
                UserModuleAccess.module_id == module_id,
            )
        )
        access = result.scalar_one_or_none()
        if access is None:
            access = UserModuleAccess(user_id=user_id, module_id=module_id, is_enabled=is_enabled)
            db.add(access)
        else:
            access.is_enabled = is_enabled

        await db.commit()
        await db.refresh(access)
        logger.info(
            "Module access toggled",
            extra={"user_id": str(user_id), "module_id": str(module_id), "is_enabled": is_enabled},
        )
        return access

    @staticmethod
    async def toggle_page_access(
        db: AsyncSession, user_id: UUID, page_id: UUID, is_enabled: bool
    ) -> UserPageAccess:
        """Upsert the (user, page) flag."""
        if not await db.get(User, user_id):
            raise NotFoundError("사용자를 찾을 수 없습니다")
        if not await db.get(ModulePage, page_id):
            raise NotFoundError("페이지를 찾을 수 없습니다")

        result = await db.execute(
            select(UserPageAccess).where(
                UserPageAccess.user_id == user_id,
                UserPageAccess.page_id == page_id,
            )
        )
        access = result.scalar_one_or_none()
        if access is None:
            access = UserPageAccess(user_id=user_id, page_id=page_id, is_enabled=is_enabled)
            db.add(access)
        else:
            access.is_enabled = is_enabled

        await db.commit()
        await db.refresh(access)
        logger.info(
            "Page access toggled",
            extra={"user_id": str(user_id), "page_id": str(page_id), "is_enabled": is_enabled},
        )
        return access
