"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

# Overdue status is only evaluated from this day of the billing month onward.
OVERDUE_START_DAY = 11

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

MAX_SYNC_ATTEMPTS = 3

OVERDUE_NOTIFICATION_TITLE = "Overdue Payments"

MIN_PASSWORD_LENGTH = 6
MIN_FULL_NAME_LENGTH = 2

DEFAULT_MEAL_TYPE = "Lunch"

# Marks a keyword argument the caller did not send, as opposed to an explicit None.
UNSET = object()
