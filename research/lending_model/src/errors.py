"""Custom errors for the lending model"""

class ProtocolError(Exception):
    """Base error class for protocol errors"""
    code = 6000

class UndercollateralizedError(ProtocolError):
    """Position would be left with more debt than its collateral allows"""
    code = 6000

class InsufficientLiquidityError(ProtocolError):
    """Market cannot cover the borrow or withdrawal"""
    code = 6001

class ArithmeticError(ProtocolError):
    """Error for arithmetic overflow/underflow"""
    code = 6002

class MathOverflowError(ArithmeticError):
    """Checked operation or narrowing exceeded the integer width"""
    code = 6002

class DivisionByZeroError(ArithmeticError):
    """Denominator was zero"""
    code = 6003

class InvalidLltvError(ProtocolError):
    """LLTV outside (0, MAX_LLTV]"""
    code = 6004

class ZeroAmountError(ProtocolError):
    """Operation amount must be greater than zero"""
    code = 6005

class UninitializedMarketError(ProtocolError):
    """Market does not exist or was never initialized"""
    code = 6006

class UnauthorizedError(ProtocolError):
    """Caller does not own the position"""
    code = 6007

class InconsistentInputError(ProtocolError):
    """Exactly one of assets or shares must be non-zero"""
    code = 6008

class InsufficientSupplyError(ProtocolError):
    """Not enough supply shares to withdraw"""
    code = 6009

class InsufficientBorrowError(ProtocolError):
    """Not enough borrow shares to repay"""
    code = 6010

class InvalidTimestampError(ProtocolError):
    """Clock went backwards or is unavailable"""
    code = 6011

class InvalidVaultError(ProtocolError):
    """Vault does not match the market's vault"""
    code = 6012

class InsufficientCollateralError(ProtocolError):
    """Not enough collateral to withdraw"""
    code = 6013

class TransferError(ProtocolError):
    """Custody transfer failed"""
    code = 6014

class MarketAlreadyInitializedError(ProtocolError):
    """A market for this loan/collateral pair already exists"""
    code = 6015
