"""Pool constants."""

# LP shares minted by the first deposit into an empty pool.
# Later deposits mint pro rata against this supply, so depositing
# (1, 50000) into an empty pool yields exactly 100_000 shares.
INITIAL_SHARE_SUPPLY = 100_000

# Asset indexes into the reserve pair
TOKEN0_INDEX = 0
TOKEN1_INDEX = 1
