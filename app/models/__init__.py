"""Models Package - Export all models for easy imports"""

from app.models.base import BaseModel, AuditMixin
from app.models.enums import *
from app.models.user import User
from app.models.company import Company, BankAccount
from app.models.customer import Customer
from app.models.order import Order, OrderPollutant, OrderMethod, Pollutant, Method
from app.models.finance import Billing, Collection, ReceivableActivity
from app.models.access import Module, ModulePage, UserModuleAccess, UserPageAccess


__all__ = [
    # Base classes
    "BaseModel",
    "AuditMixin",

    # Users
    "User",

    # Companies
    "Company",
    "BankAccount",

    # Customers
    "Customer",

    # Sales
    "Order",
    "OrderPollutant",
    "OrderMethod",
    "Pollutant",
    "Method",

    # Finance
    "Billing",
    "Collection",
    "ReceivableActivity",

    # Access control
    "Module",
    "ModulePage",
    "UserModuleAccess",
    "UserPageAccess",
]
