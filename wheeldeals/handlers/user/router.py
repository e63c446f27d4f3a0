# wheeldeals/handlers/user/router.py
from aiogram import Router

from wheeldeals.handlers.user.spin import router as spin_router
from wheeldeals.handlers.user.quota import router as quota_router

router = Router(name="user")

router.include_router(spin_router)
router.include_router(quota_router)
