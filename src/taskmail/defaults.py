"""Default values shared across taskmail modules."""

DEFAULT_SMTP_PORT = 587

# Retrieval endpoints of the mail provider the service was first deployed against
DEFAULT_IMAP_HOST = "imap.gmail.com"
DEFAULT_IMAP_PORT = 993
DEFAULT_POP3_HOST = "pop.gmail.com"
DEFAULT_POP3_PORT = 995

DEFAULT_INBOX_FOLDER = "INBOX"
DEFAULT_RECENT_MESSAGE_LIMIT = 5

DEFAULT_CONNECT_TIMEOUT = 15.0
DEFAULT_AUTH_TIMEOUT = 15.0
DEFAULT_OPERATION_TIMEOUT = 30.0
DEFAULT_MAX_CONCURRENT_SESSIONS = 4

DEFAULT_DATABASE_URL = "sqlite:///./tasks.db"
DEFAULT_HTTP_PORT = 8090
