from .user import User
from .merchant import Merchant, MerchantStaff, WheelOption
from .spin import Spin, SpinQuota, SpinStatus
from .stats import MerchantDailyStats, UserMerchantDailyStats

__all__ = [
    "User",
    "Merchant",
    "MerchantStaff",
    "WheelOption",
    "Spin",
    "SpinQuota",
    "SpinStatus",
    "MerchantDailyStats",
    "UserMerchantDailyStats",
]
