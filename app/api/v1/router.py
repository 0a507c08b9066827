"""API V1 Router"""

from fastapi import APIRouter, Depends

# Import endpoint routers
from app.api import deps
from app.api.v1.endpoints import (
    auth, users, companies, customers, orders,
    billings, collections, receivables, module_access,
)
from app.models.enums import ModuleCode

# Create API v1 router
api_router = APIRouter()

admin_module = [Depends(deps.require_module(ModuleCode.ADMIN.value))]
sales_module = [Depends(deps.require_module(ModuleCode.INKWANG_ES.value))]

# Include endpoint routers with prefixes and tags
api_router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
api_router.include_router(module_access.router, prefix="/module-access", tags=["Module Access"])

# Administration (admin module)
api_router.include_router(users.router, prefix="/users", tags=["Users"], dependencies=admin_module)
api_router.include_router(companies.router, prefix="/companies", tags=["Companies"], dependencies=admin_module)

# Sales & finance (inkwang-es module)
api_router.include_router(customers.router, prefix="/customers", tags=["Customers"], dependencies=sales_module)
api_router.include_router(orders.router, prefix="/orders", tags=["Orders"], dependencies=sales_module)
api_router.include_router(billings.router, prefix="/billings", tags=["Billings"], dependencies=sales_module)
api_router.include_router(collections.router, prefix="/collections", tags=["Collections"], dependencies=sales_module)
api_router.include_router(receivables.router, prefix="/receivables", tags=["Receivables"], dependencies=sales_module)
