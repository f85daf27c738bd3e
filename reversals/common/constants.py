"""Application constants."""

US_DATE_FORMAT = "M/D/YYYY"
EUROPE_DATE_FORMAT = "D/M/YYYY"
TIME_FORMAT = "H:mm"

# Day-first: 2 January 2020.
NEW_TOS_CUT_OFF_DATE = "2/1/2020"
NEW_TOS_CUT_OFF_LOCATION = "Europe"

DEFAULT_DEADLINES_HOURS = {
    "phone": {"old_tos": 4, "new_tos": 8},
    "web app": {"old_tos": 8, "new_tos": 16},
}

ON_INVALID_FAIL = "fail"
ON_INVALID_SKIP = "skip"
ON_INVALID_CHOICES = (ON_INVALID_FAIL, ON_INVALID_SKIP)

COMMANDS = ("evaluate", "export")
EXIT_SUCCESS = 0
EXIT_PARTIAL = 10
EXIT_HARD_FAIL = 20

DECISIONS_FILENAME = "reversal_decisions.csv"
JSON_LOG_FIELDS = (
    "timestamp",
    "run_id",
    "stage",
    "event",
    "status",
    "record_index",
    "rows_in",
    "rows_out",
    "error_code",
    "duration_ms",
    "message",
)
