"""Default constants used across the memeagent package.

Centralizes defaults so they can be imported from one place.
"""

DEFAULT_SEARCH_TAG = "#memeCoin"
DEFAULT_DENY_LIST = ("scam", "rug")

# 5 round trips (buy then sell) per day
DEFAULT_MAX_DAILY_OPERATIONS = 5
# allowed range for any position target multiplier
TARGET_MULTIPLIER_FLOOR = 2.0
TARGET_MULTIPLIER_CEILING = 5.0
DEFAULT_TARGET_MULTIPLIER_MIN = TARGET_MULTIPLIER_FLOOR
DEFAULT_TARGET_MULTIPLIER_MAX = TARGET_MULTIPLIER_CEILING

DEFAULT_PRICE_CEILING = 0.01
DEFAULT_MARKET_CAP_THRESHOLD = 5000.0
DEFAULT_MARKET_CAP_BAND = 0.5

DEFAULT_BUY_SIZE_SOL = 0.1
DEFAULT_SLIPPAGE_BPS = 100

DEFAULT_CYCLE_INTERVAL_SECONDS = 4 * 60 * 60
DEFAULT_REQUEST_TIMEOUT_SECONDS = 15.0

DEFAULT_BUDGET_WINDOW_HOURS = 24.0
DEFAULT_BUDGET_RESET_EVERY_CYCLES = 6

DEFAULT_SOLANA_RPC_URL = "https://api.mainnet-beta.solana.com"
DEXSCREENER_SEARCH_URL = "https://api.dexscreener.com/latest/dex/search"
X_RECENT_SEARCH_URL = "https://api.twitter.com/2/tweets/search/recent"
JUPITER_QUOTE_URL = "https://lite-api.jup.ag/swap/v1/quote"
JUPITER_SWAP_URL = "https://lite-api.jup.ag/swap/v1/swap"
WRAPPED_SOL_MINT = "So11111111111111111111111111111111111111112"
LAMPORTS_PER_SOL = 1_000_000_000
