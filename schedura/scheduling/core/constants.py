"""
Shared constants for the scheduling system.
"""

# Slot occupants
AVAILABLE = "AVAILABLE"
BUSY = "BUSY"
BUFFER = "BUFFER"

# Priority weights used for ordering (higher is placed first)
PRIORITY_WEIGHTS = {
    "high": 3,
    "medium": 2,
    "low": 1,
}
DEFAULT_PRIORITY = "medium"

DEFAULT_HORIZON_DAYS = 7
DEFAULT_ROUNDING_MINUTES = 15

# Confidence heuristics
EVENING_WINDOW_HOURS = 2
EVENING_PENALTY = 0.8
HIGH_PRIORITY_LATE_WINDOW_HOURS = 4
HIGH_PRIORITY_LATE_PENALTY = 0.9

# Unplaced reasons
REASON_INVALID_DURATION = "invalid duration"
REASON_INVALID_TRAVEL_BUFFER = "invalid travel buffer"
REASON_DUPLICATE_TASK = "duplicate task id"
REASON_NO_WINDOW = "no free window of required length within horizon"
REASON_EARLIEST_START = "earliest-start constraint excludes all free windows"
REASON_LATEST_START = "latest-start constraint excludes all free windows"
REASON_DAILY_CAP = "daily hours cap leaves no room within horizon"

SATURDAY = 5
SUNDAY = 6
