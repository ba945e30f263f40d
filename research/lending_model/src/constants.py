# Integer widths
U64_MAX = 2**64 - 1
U128_MAX = 2**128 - 1
I64_MIN = -(2**63)
I64_MAX = 2**63 - 1

# Virtual shares offsets (inflation attack protection)
VIRTUAL_SHARES = 1_000_000
VIRTUAL_ASSETS = 1

# Fixed point scale factors
PRICE_PRECISION = 1_000_000  # 6 decimals for price
LLTV_PRECISION = 100_000_000  # 1e8, 80% = 80_000_000
MAX_LLTV = LLTV_PRECISION  # 100%
WAD = 1_000_000_000_000_000_000  # 1e18 for interest

# Oracle constants
# 100 loan units per collateral unit, divided by 1000 for 9 -> 6 decimals
FIXED_ORACLE_PRICE = 100 * PRICE_PRECISION // 1000

# Interest constants
FIXED_ANNUAL_RATE_WAD = WAD * 5 // 100  # 5% APR
SECONDS_PER_YEAR = 31_557_600  # 365.25 days * 24 hours * 60 minutes * 60 seconds
