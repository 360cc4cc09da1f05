import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# Single shared operator account for the scanning station.
OPERATOR_PASSWORD = os.getenv("OPERATOR_PASSWORD", "admin")

SCHOOL_NAME = os.getenv("SCHOOL_NAME", "MTs Riyadlul Ulum")

# JSON snapshot restored on startup when the file exists.
SNAPSHOT_PATH = os.getenv("SNAPSHOT_PATH", "data/snapshot.json")
SEED_DEMO_ROSTER = bool(int(os.getenv("SEED_DEMO_ROSTER", "1")))

# WhatsApp dispatch
WA_MODE = os.getenv("WA_MODE", "link")
WA_API_URL = os.getenv("WA_API_URL", "https://api.fonnte.com/send")
WA_API_KEY = os.getenv("WA_API_KEY", "")
WA_AUTO_SEND = bool(int(os.getenv("WA_AUTO_SEND", "0")))
WA_COUNTRY_CODE = os.getenv("WA_COUNTRY_CODE", "62")
WA_SIMULATED_DELAY = float(os.getenv("WA_SIMULATED_DELAY", "0.5"))
WA_TIMEOUT = float(os.getenv("WA_TIMEOUT", "15"))

# Report summarizer
GEMINI_API_KEY = os.getenv("GEMINI_API_KEY", "")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-3-flash-preview")
GEMINI_API_URL = os.getenv("GEMINI_API_URL", "")
RETRY_MAX_ATTEMPTS = int(os.getenv("RETRY_MAX_ATTEMPTS", "3"))
RETRY_BASE_DELAY = float(os.getenv("RETRY_BASE_DELAY", "1.0"))
