"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

EARTH_RADIUS_M = 6_371_000
DEFAULT_OFFICE_RADIUS_M = 50.0
DEFAULT_TOKEN_HOURS = 24
MIN_PASSWORD_LENGTH = 6
