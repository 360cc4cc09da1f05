"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

PRIMARY_CODE_LENGTH = 10
DEFAULT_COUNTRY_CODE = "62"

NO_RECORD_MARK = "."
NO_TIME_MARK = "—"
NO_INFORMATION_LABEL = "No Information"

ACTIVITY_FEED_LIMIT = 10

DEFAULT_GATEWAY_URL = "https://api.fonnte.com/send"
DEFAULT_SIMULATED_DELAY_SECONDS = 0.5
DEFAULT_GATEWAY_TIMEOUT_SECONDS = 15.0

DEFAULT_RETRY_ATTEMPTS = 3
DEFAULT_RETRY_BASE_DELAY_SECONDS = 1.0

DEFAULT_SCHOOL_NAME = "MTs Riyadlul Ulum"
GATEWAY_SESSION_PREFIX = "SIABDUL-WA-SESSION-"
