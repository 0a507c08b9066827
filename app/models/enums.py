"""Centralized Enum Definitions"""

import enum


# Domain 1: Users & Access
class UserRole(str, enum.Enum):
    """User roles for RBAC"""
    ADMIN = "admin"
    MANAGER = "manager"
    USER = "user"


class EmploymentStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class ModuleCode(str, enum.Enum):
    """Functional areas that can be switched on per user"""
    ADMIN = "admin"
    INKWANG_ES = "inkwang-es"
    INKWANG_EC = "inkwang-ec"


# Domain 2: Customers
class CustomerType(str, enum.Enum):
    CLIENT = "발주처"
    VERIFICATION_COMPANY = "검증업체"


class CustomerStatus(str, enum.Enum):
    ACTIVE = "거래중"
    SUSPENDED = "중단"


# Domain 3: Sales orders
class ContractType(str, enum.Enum):
    """신규 (original) or 변경 (amendment) contract"""
    NEW = "new"
    CHANGE = "change"


class ContractStatus(str, enum.Enum):
    QUOTATION = "quotation"
    CONTRACT = "contract"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class BusinessType(str, enum.Enum):
    CIVILIAN = "civilian"
    GOVERNMENT = "government"


class PricingType(str, enum.Enum):
    TOTAL = "total"
    UNIT_PRICE = "unit_price"


class PricingUnit(str, enum.Enum):
    """Unit for unit-price contracts"""
    TON = "Ton"
    VEHICLE = "대"
    CUBIC_METER = "㎥"


class ExportType(str, enum.Enum):
    ON_SITE = "on_site"
    EXPORT = "export"
    NEW_BUSINESS = "new_business"


# Domain 4: Finance
class BillingType(str, enum.Enum):
    """계약금 / 중도금 / 잔금"""
    CONTRACT = "contract"
    INTERIM = "interim"
    FINAL = "final"


class InvoiceStatus(str, enum.Enum):
    ISSUED = "issued"
    NOT_ISSUED = "not_issued"


class CollectionMethod(str, enum.Enum):
    BANK_TRANSFER = "bank_transfer"
    OTHER = "other"


class ReceivableStatus(str, enum.Enum):
    """미수 / 부분수금 / 수금완료"""
    PENDING = "pending"
    PARTIAL = "partial"
    COMPLETED = "completed"


class ReceivableClassification(str, enum.Enum):
    """정상 / 장기 / 부실 / 대손"""
    NORMAL = "normal"
    OVERDUE_LONG = "overdue_long"
    BAD_DEBT = "bad_debt"
    WRITTEN_OFF = "written_off"
