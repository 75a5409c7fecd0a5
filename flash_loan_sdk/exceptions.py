class FlashLoanError(Exception):
    pass


class NotFoundError(FlashLoanError):
    """Account does not exist at the requested address."""


class DeserializationError(FlashLoanError):
    """Account bytes do not match the Reserve layout."""


class InvalidAmountError(FlashLoanError, ValueError):
    """Amount is zero, negative, not an integer, or above available liquidity."""


class RpcError(FlashLoanError):
    pass


NotFound = NotFoundError
InvalidAmount = InvalidAmountError
