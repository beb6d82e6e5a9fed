"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_TOKEN_TTL_HOURS = 24
QR_CODE_PREFIX = "QR_"
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_FULL_NAME = "Administrator"
DEFAULT_ADMIN_EMAIL = "admin@smpitadifathi.sch.id"
MIN_PASSWORD_LENGTH = 6
