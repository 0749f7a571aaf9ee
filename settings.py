from pathlib import Path
from config.loader import get_config_loader

# Get the config loader instance
config = get_config_loader()

# Server configuration
PORT = config.get("PORT", 8080)
LOG_LEVEL = config.get("LOG_LEVEL", "info")
BIND_ADDRESS = config.get("BIND_ADDRESS", "0.0.0.0")

# X OAuth 2.0 app credentials (required, validated when services are built)
CLIENT_ID = config.get("CLIENT_ID", "")
CLIENT_SECRET = config.get("CLIENT_SECRET", "")

# Callback route served by this service; REDIRECT_URI must match the value
# registered in the X developer portal
CALLBACK_PATH = config.get("CALLBACK_PATH", "/auth/callback")
REDIRECT_URI = config.get("REDIRECT_URI", f"http://localhost:{PORT}{CALLBACK_PATH}")

# X endpoints (hardcoded - not user configurable)
AUTHORIZE_URL = "https://twitter.com/i/oauth2/authorize"
API_BASE = "https://api.twitter.com"
TOKEN_URL = f"{API_BASE}/2/oauth2/token"
USER_INFO_URL = f"{API_BASE}/2/users/me"
TWEETS_URL = f"{API_BASE}/2/tweets"
SCOPES = "tweet.read tweet.write users.read offline.access"

# HTTP client timeout in seconds
HTTP_TIMEOUT = config.get("HTTP_TIMEOUT", 30.0)

# Tabular store: json (local file), memory (process only) or gsheets (Google Sheets)
STORE_BACKEND = config.get("STORE_BACKEND", "json")
SPREADSHEET_ID = config.get("SPREADSHEET_ID", "")
GOOGLE_SERVICE_ACCOUNT_FILE = config.get("GOOGLE_SERVICE_ACCOUNT_FILE", "")
WORKBOOK_FILE = config.get("WORKBOOK_FILE", str(Path.home() / ".x-sheet-poster" / "workbook.json"))

# Sheet layout
CREDENTIALS_SHEET = config.get("CREDENTIALS_SHEET", "credentials")
DEFAULT_CHANNEL = config.get("DEFAULT_CHANNEL", "posts")
SCHEDULED_CHANNELS = config.get_list("SCHEDULED_CHANNELS", ["posts_1", "posts_2", "posts_3"])
# auto: sniff header keywords in the first cell, always: first row is a header, never: no header
CONTENT_HEADER_MODE = config.get("CONTENT_HEADER_MODE", "auto")

# Optional on-disk PKCE slot so `cli authorize` and the web callback can run in
# different processes; empty keeps the session in memory
PKCE_SESSION_FILE = config.get("PKCE_SESSION_FILE", "")
