"""Constants and defaults."""

SESSION_TTL_MINUTES = 15
SESSION_CODE_MIN = 100000
SESSION_CODE_MAX = 999999
TOKEN_ALGORITHM = "HS256"
