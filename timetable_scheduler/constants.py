from typing import List

# Teaching week, in scan order (Mon -> Fri). Placement tie-breaks depend on it.
DAYS: List[str] = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]

# One-hour teaching slots, in scan order. Entries address them by index.
TIME_SLOTS: List[str] = [
    "07:00 - 07:50", "07:50 - 08:40", "08:50 - 09:40", "09:40 - 10:30",
    "10:40 - 11:30", "11:30 - 12:20", "12:20 - 13:10", "13:10 - 14:00",
    "14:00 - 14:50", "14:50 - 15:40", "15:50 - 16:40", "16:40 - 17:30",
    "17:40 - 18:30", "18:30 - 19:20", "19:20 - 20:10", "20:10 - 21:00",
]

SESSION_TYPES: List[str] = ["theory", "practice", "lab", "seminar"]

# lab first, then practice, then everything else
SESSION_PRIORITY = {"lab": 0, "practice": 1}

# Score added per occupied neighbour slot when compaction is on.
COMPACTION_BONUS: int = 10

UNASSIGNED_TEACHER_PREFIX = "TBD"
