# Forecast Source
DEFAULT_FORECAST_URL = (
    "https://www.mountwashington.org/experience-the-weather/higher-summit-forecast.aspx"
)

# Page Selectors
OUTLOOK_SELECTOR = "div#SummitOutlook"
FULL_FORECAST_SELECTOR = "#SummitOutlook > p"
ABBREVIATED_FORECAST_SELECTOR = "#SummitOutlook > div"

# inReach Reply Page Selectors
INREACH_MESSAGE_SELECTOR = "#ReplyMessage"
INREACH_SEND_SELECTOR = "#sendBtn"

# Storage
DEFAULT_FORECAST_FULL_PATH = "forecast_full.txt"
DEFAULT_FORECAST_ABBREVIATED_PATH = "forecast_abbreviated.txt"
STORAGE_ENCODING = "utf-8"

# Satellite Messaging
SMS_MAX_LENGTH = 160
CHUNK_SEND_DELAY = 1.0  # Seconds between transmitted chunks

# Browser
BROWSER_LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox", "--disable-dev-shm-usage"]
SESSION_POLICY_PER_CYCLE = "per_cycle"
SESSION_POLICY_REUSE = "reuse"
SESSION_POLICIES = (SESSION_POLICY_PER_CYCLE, SESSION_POLICY_REUSE)

# Default Configuration Values
DEFAULT_POLL_INTERVAL = 60
DEFAULT_PAGE_TIMEOUT_MS = 30000
DEFAULT_CYCLE_MAX_RETRIES = 3
DEFAULT_RETRY_BASE_DELAY = 5.0
DEFAULT_MAX_CONSECUTIVE_ERRORS = 5
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "forecast_bot.log"
DEFAULT_LOG_FORMAT = "text"  # text or json
DEFAULT_LOG_MAX_BYTES = 10 * 1024 * 1024  # 10MB
DEFAULT_LOG_BACKUP_COUNT = 5
DEFAULT_LOG_TIMEZONE = "America/New_York"
