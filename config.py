"""Centralised domain constants for the PNS personnel service."""

import os

# Retirement window (inclusive ages). Employees whose age falls in this band
# show up on the "approaching retirement" list.
RETIREMENT_MIN_AGE = 56
RETIREMENT_MAX_AGE = 60

# Session tokens expire after this many minutes.
TOKEN_TTL_MINUTES = int(os.environ.get("TOKEN_TTL_MINUTES", "1440"))
TOKEN_ALGORITHM = "HS256"

# wilayah.id lookups are interactive (form dropdowns) -- fail fast.
WILAYAH_TIMEOUT_SECONDS = 5

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100
