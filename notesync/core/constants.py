"""System-wide constants. All magic numbers and strings live here."""

from __future__ import annotations

# ── Backend ──────────────────────────────────────────────────────
DEFAULT_API_BASE_URL = "https://notes-app-backend-brown.vercel.app/api"
DEFAULT_HTTP_TIMEOUT = 15.0  # seconds

# ── Backend paths ────────────────────────────────────────────────
PATH_LOGIN = "/auth/login"
PATH_ME = "/auth/me"
PATH_TENANT = "/tenants/{tenant_id}"
PATH_TENANT_UPGRADE = "/tenants/{tenant_id}/upgrade"
PATH_NOTES = "/notes"
PATH_NOTE = "/notes/{note_id}"

# ── Messages ─────────────────────────────────────────────────────
MSG_REQUEST_FAILED = "Request failed"
MSG_NETWORK_ERROR = "Network error"
MSG_MALFORMED_RESPONSE = "Malformed response from server"
MSG_FIELDS_REQUIRED = "Title and content are required"
MSG_ADMIN_ONLY = "Only tenant admins can upgrade the plan"
MSG_FETCH_NOTES_FAILED = "Failed to fetch notes"

MSG_LOGGED_IN = "Logged in successfully!"
MSG_LOGGED_OUT = "Logged out successfully!"
MSG_NOTE_CREATED = "Note created successfully!"
MSG_NOTE_UPDATED = "Note updated successfully!"
MSG_NOTE_DELETED = "Note deleted successfully!"
MSG_TENANT_UPGRADED = "Tenant upgraded to Pro successfully!"

# ── Demo accounts (seeded on the reference backend) ──────────────
DEMO_PASSWORD = "password"
DEMO_ACCOUNTS: tuple[tuple[str, str], ...] = (
    ("admin@acme.test", "Acme Admin"),
    ("user@acme.test", "Acme User"),
    ("admin@globex.test", "Globex Admin"),
    ("user@globex.test", "Globex User"),
)

UNLIMITED_SYMBOL = "∞"
