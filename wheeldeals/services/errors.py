# wheeldeals/services/errors.py
from __future__ import annotations


class WheelError(Exception):
    """Base for every failure the spin/redeem core reports to callers."""


class InvalidInput(WheelError):
    """Malformed prize list (empty, or total weight <= 0)."""


class QuotaExceeded(WheelError):
    def __init__(self, *, user_id: int, merchant_id: str, daily_limit: int) -> None:
        super().__init__(f"Daily limit of {daily_limit} spins reached for merchant {merchant_id!r}")
        self.user_id = user_id
        self.merchant_id = merchant_id
        self.daily_limit = daily_limit


class RedeemError(WheelError):
    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class NotFound(RedeemError):
    def __init__(self, code: str) -> None:
        super().__init__(code, f"Code {code!r} not found")


class AlreadyRedeemed(RedeemError):
    def __init__(self, code: str) -> None:
        super().__init__(code, f"Code {code!r} was already redeemed")


class Expired(RedeemError):
    def __init__(self, code: str) -> None:
        super().__init__(code, f"Code {code!r} has expired")


class StorageUnavailable(WheelError):
    """Database fault. Nothing from the failed operation was committed."""


class CodeAllocationFailed(StorageUnavailable):
    """Every generated code collided with an existing one."""


class UnknownMerchant(InvalidInput):
    def __init__(self, merchant_id: str) -> None:
        super().__init__(f"Merchant {merchant_id!r} not found or inactive")
        self.merchant_id = merchant_id
