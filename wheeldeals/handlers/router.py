from aiogram import Router

from wheeldeals.handlers.merchant.router import router as merchant_router
from wheeldeals.handlers.user.router import router as user_router
from wheeldeals.handlers.common import router as common_router

router = Router()

router.include_router(merchant_router)
router.include_router(user_router)
router.include_router(common_router)  # LAST = fallback only
