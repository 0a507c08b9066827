#!/usr/bin/env python3
"""
Seed reference data: modules and pages, pollutants, remediation methods and
an initial admin account. Safe to run repeatedly; existing rows are kept.

Usage:
  python scripts/seed_data.py
  # Admin account from SEED_ADMIN_EMAIL / SEED_ADMIN_PASSWORD (skipped if unset)
"""
import asyncio
import logging
import os
import sys
from typing import Optional

from dotenv import load_dotenv

_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
load_dotenv(os.path.join(_root, ".env"))

# Add project root to path
sys.path.insert(0, _root)

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import setup_logging
from app.core.security import get_password_hash
from app.database import AsyncSessionLocal, close_db, init_db
from app.models.access import Module, ModulePage
from app.models.enums import EmploymentStatus, ModuleCode, UserRole
from app.models.order import Method, Pollutant
from app.models.user import User

logger = logging.getLogger("seed_data")

# (code, name, href, is_active, [(page_code, page_name, href)])
MODULES = [
    (ModuleCode.ADMIN.value, "관리자", "/admin", True, [
        ("employees", "사원관리", "/admin/employees"),
        ("companies", "회사 정보", "/admin/company/companies"),
        ("bank-accounts", "은행계좌", "/admin/company/bank-accounts"),
    ]),
    (ModuleCode.INKWANG_ES.value, "인광이에스", "/inkwang-es", True, [
        ("customers", "고객관리", "/inkwang-es/basics/customers"),
        ("orders", "수주관리", "/inkwang-es/sales/orders"),
        ("billings", "청구관리", "/inkwang-es/finance/billings"),
        ("collections", "수금관리", "/inkwang-es/finance/collections"),
        ("receivables", "미수금관리", "/inkwang-es/finance/receivables"),
    ]),
    (ModuleCode.INKWANG_EC.value, "인광이씨", "/inkwang-ec", False, []),
]

# (name, category, unit)
POLLUTANTS = [
    ("TPH", "유류", "mg/kg"),
    ("벤젠", "유류", "mg/kg"),
    ("톨루엔", "유류", "mg/kg"),
    ("에틸벤젠", "유류", "mg/kg"),
    ("크실렌", "유류", "mg/kg"),
    ("카드뮴", "중금속", "mg/kg"),
    ("구리", "중금속", "mg/kg"),
    ("비소", "중금속", "mg/kg"),
    ("수은", "중금속", "mg/kg"),
    ("납", "중금속", "mg/kg"),
    ("6가크롬", "중금속", "mg/kg"),
    ("아연", "중금속", "mg/kg"),
    ("니켈", "중금속", "mg/kg"),
    ("불소", "기타", "mg/kg"),
]

METHODS = ["토양경작법", "토양세척법", "열탈착법", "바이오파일", "고형화/안정화", "화학적산화"]


async def seed_modules(db: AsyncSession) -> int:
    created = 0
    for sort_order, (code, name, href, is_active, pages) in enumerate(MODULES, start=1):
        module = await db.scalar(select(Module).where(Module.code == code))
        if module is None:
            module = Module(code=code, name=name, href=href, sort_order=sort_order, is_active=is_active)
            db.add(module)
            await db.flush()
            created += 1

        existing = set((await db.execute(
            select(ModulePage.code).where(ModulePage.module_id == module.id)
        )).scalars().all())
        for page_order, (page_code, page_name, page_href) in enumerate(pages, start=1):
            if page_code in existing:
                continue
            db.add(ModulePage(
                module_id=module.id, code=page_code, name=page_name, href=page_href, sort_order=page_order,
            ))
            created += 1
    return created


async def seed_reference_lists(db: AsyncSession) -> int:
    created = 0
    existing = set((await db.execute(select(Pollutant.name))).scalars().all())
    for sort_order, (name, category, unit) in enumerate(POLLUTANTS, start=1):
        if name not in existing:
            db.add(Pollutant(name=name, category=category, unit=unit, sort_order=sort_order))
            created += 1

    existing = set((await db.execute(select(Method.name))).scalars().all())
    for sort_order, name in enumerate(METHODS, start=1):
        if name not in existing:
            db.add(Method(name=name, sort_order=sort_order))
            created += 1
    return created


async def seed_admin(db: AsyncSession, email: str, password: str, name: str = "관리자") -> Optional[User]:
    email = email.lower()
    user = await db.scalar(select(User).where(User.email == email))
    if user is not None:
        return user
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        name=name,
        role=UserRole.ADMIN,
        employment_status=EmploymentStatus.ACTIVE,
        is_active=True,
    )
    db.add(user)
    return user


async def seed(admin_email: Optional[str] = None, admin_password: Optional[str] = None) -> None:
    """Create tables if needed and insert missing reference rows in one transaction."""
    await init_db()
    async with AsyncSessionLocal() as db:
        modules = await seed_modules(db)
        references = await seed_reference_lists(db)
        if admin_email and admin_password:
            await seed_admin(db, admin_email, admin_password)
        await db.commit()
    logger.info("Seed complete", extra={"modules_and_pages": modules, "reference_rows": references})


async def _run() -> None:
    try:
        await seed(os.getenv("SEED_ADMIN_EMAIL"), os.getenv("SEED_ADMIN_PASSWORD"))
    finally:
        await close_db()


def main():
    setup_logging()
    asyncio.run(_run())


if __name__ == "__main__":
    main()
