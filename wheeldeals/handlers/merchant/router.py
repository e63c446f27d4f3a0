# wheeldeals/handlers/merchant/router.py
from aiogram import Router

from wheeldeals.handlers.merchant.dashboard import router as dashboard_router
from wheeldeals.handlers.merchant.redeem import router as redeem_router
from wheeldeals.handlers.merchant.staff_admin import router as staff_admin_router

router = Router(name="merchant")

router.include_router(staff_admin_router)
router.include_router(redeem_router)
router.include_router(dashboard_router)
