SECRET_KEY = "test-secret"

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"

OPERATOR_PASSWORD = "test-password"
SCHOOL_NAME = "MTs Riyadlul Ulum"

SNAPSHOT_PATH = ""
SEED_DEMO_ROSTER = True

WA_MODE = "link"
WA_API_URL = "https://api.fonnte.com/send"
WA_API_KEY = ""
WA_AUTO_SEND = False
WA_COUNTRY_CODE = "62"
WA_SIMULATED_DELAY = 0.0
WA_TIMEOUT = 5.0

GEMINI_API_KEY = ""
GEMINI_MODEL = "gemini-3-flash-preview"
GEMINI_API_URL = ""
RETRY_MAX_ATTEMPTS = 3
RETRY_BASE_DELAY = 0.0
