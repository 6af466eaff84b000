"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_SCHEDULED_REGULAR_HOURS = 8.0
DEFAULT_OVERTIME_MULTIPLIER = 1.5
DEFAULT_DEVICE_ID = "ZKTeco-K40"
