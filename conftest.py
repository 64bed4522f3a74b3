"""Global pytest configuration."""

import os

# Pin settings defaults for tests before any imports
os.environ.setdefault("TRIPBOARD_DEFAULT_CURRENCY", "AUD")
os.environ.setdefault("TRIPBOARD_ITINERARY_ID_PREFIX", "iti_")
