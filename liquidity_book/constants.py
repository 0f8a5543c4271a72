"""Protocol constants for the liquidity book pools."""

# Fixed-point scale for bin prices (right token per unit of left token)
PRICE_SCALE = 10**18

# Fees and bin steps are expressed in basis points
BPS_DENOMINATOR = 10_000

# Id of the first bin of every pool; leaves room for 2^23 bins on each side
INITIAL_BIN_ID = 2**23

# Bins live in [0, 2^24): no bin is further than this from the initial bin
MAX_BIN_OFFSET = INITIAL_BIN_ID

# Largest bin step accepted (100% per bin)
MAX_BIN_STEP_BPS = 10_000

# Fees at or above 100% would consume the whole input
MAX_FEE_BPS = BPS_DENOMINATOR - 1

# Upper bound on bins walked by a single swap
DEFAULT_MAX_BINS_PER_SWAP = 256
