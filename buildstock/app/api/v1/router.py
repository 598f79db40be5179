from fastapi import APIRouter

from buildstock.app.api.v1.endpoints.health import router as health_router
from buildstock.app.api.v1.endpoints.materials import router as materials_router
from buildstock.app.api.v1.endpoints.stock import router as stock_router
from buildstock.app.api.v1.endpoints.stock_movements import router as stock_movements_router
from buildstock.app.api.v1.endpoints.users import router as users_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(materials_router, tags=["materials"])
router.include_router(stock_router, tags=["stock"])
router.include_router(stock_movements_router, tags=["stock_movements"])
router.include_router(users_router, tags=["users"])
