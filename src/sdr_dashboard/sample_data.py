from __future__ import annotations

from datetime import date

from .models import DailyActivityRecord

SAMPLE_ACTIVITY = (
    DailyActivityRecord(date(2024, 1, 1), dials=120, conversations=15, calls=45, emails=30, linked_in=25, meetings=3),
    DailyActivityRecord(date(2024, 1, 2), dials=135, conversations=18, calls=50, emails=35, linked_in=30, meetings=4),
    DailyActivityRecord(date(2024, 1, 3), dials=110, conversations=14, calls=40, emails=28, linked_in=22, meetings=3),
    DailyActivityRecord(date(2024, 1, 4), dials=145, conversations=20, calls=55, emails=38, linked_in=32, meetings=5),
    DailyActivityRecord(date(2024, 1, 5), dials=125, conversations=16, calls=48, emails=33, linked_in=27, meetings=4),
)
