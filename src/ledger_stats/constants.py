"""Chain-level asset identifiers and display constants."""

# Native staking token (UM).
NATIVE_ASSET_ID_HEX = "29ea9c2f3371f6a487e7e95c247041f4a356f983eb064e5d2b3bcf322ca96a10"

# USDC, used as the reference currency for the equivalent supply.
REFERENCE_ASSET_ID_HEX = (
    "76b3e4b10681358c123b381f90638476b7789040e47802de879f0fb3eedc8d0b"
)

ASSET_ID_LENGTH = 32

# Human-readable prefix of the bech32m asset id form
ASSET_ID_HRP = "passet"

# Fractional digits shown for every scaled amount
DISPLAY_PRECISION = 4

# 1x1 transparent PNG shown when an asset has no usable icon
PLACEHOLDER_IMAGE = (
    "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAACklEQVR4"
    "nGMAAQAABQABDQottAAAAABJRU5ErkJggg=="
)

DEFAULT_FETCH_TIMEOUT_SECONDS = 30.0
DEFAULT_POOL_MIN_SIZE = 1
DEFAULT_POOL_MAX_SIZE = 4
DEFAULT_CONNECT_RETRIES = 3
DEFAULT_CONNECT_TIMEOUT_SECONDS = 10.0
