"""Schedule value type.

A schedule is one of:
- NONE: plain todo
- RECURRING: comes back every ``period_days`` after it was last done
- REMINDER: pops up (becomes undone) on a target date

Encoded as a suffix on the item line: `` [D7(2024-01-31)]`` or
`` [R(2024-02-14)]``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from enum import StrEnum

from todotree.todos import dates

_RECURRING_RE = re.compile(r"^D(?P<period>-?\d+)\((?P<date>[^()]*)\)$")
_REMINDER_RE = re.compile(r"^R\((?P<date>[^()]*)\)$")
_SUFFIX_RE = re.compile(r"^(?P<rest>.*?) ?\[(?P<body>[^\[\]]*)\]$")


class ScheduleType(StrEnum):
    NONE = "none"
    RECURRING = "recurring"
    REMINDER = "reminder"


@dataclass
class Schedule:
    """When an item should come back.

    ``when`` is the last-done date for recurring schedules and the target
    date for reminders.
    """

    type: ScheduleType = ScheduleType.NONE
    period_days: int = 0
    when: date | None = None
    last_type: ScheduleType = field(default=ScheduleType.NONE, compare=False)

    @classmethod
    def recurring(cls, period_days: int, last_done: date | None = None) -> Schedule:
        return cls(ScheduleType.RECURRING, period_days, last_done)

    @classmethod
    def reminder(cls, target_date: date | None) -> Schedule:
        return cls(ScheduleType.REMINDER, 0, target_date)

    @classmethod
    def parse(cls, text: str) -> Schedule:
        """Parse bracket contents such as ``D1(2023-09-05)`` or ``R()``."""
        if match := _RECURRING_RE.match(text):
            return cls.recurring(
                int(match.group("period")), dates.parse_date(match.group("date"))
            )
        if match := _REMINDER_RE.match(text):
            return cls.reminder(dates.parse_date(match.group("date")))
        return cls()

    @classmethod
    def split_message(cls, message: str) -> tuple[str, Schedule]:
        """Strip a trailing schedule suffix from a raw message.

        Bracketed text that is not a schedule stays part of the message.
        """
        match = _SUFFIX_RE.match(message)
        if match is None:
            return message, cls()
        schedule = cls.parse(match.group("body"))
        if schedule.is_none:
            return message, schedule
        return match.group("rest"), schedule

    @property
    def is_none(self) -> bool:
        return self.type == ScheduleType.NONE

    @property
    def is_recurring(self) -> bool:
        return self.type == ScheduleType.RECURRING

    @property
    def is_reminder(self) -> bool:
        return self.type == ScheduleType.REMINDER

    @property
    def last_done(self) -> date | None:
        return self.when if self.is_recurring else None

    @property
    def target_date(self) -> date | None:
        return self.when if self.is_reminder else None

    def encode(self) -> str:
        date_str = dates.format_date(self.when)
        if self.type == ScheduleType.RECURRING:
            return f" [D{self.period_days}({date_str})]"
        if self.type == ScheduleType.REMINDER:
            return f" [R({date_str})]"
        return ""

    def days_since(self, today: date | None = None) -> int:
        return dates.diff_days(today or dates.today(), self.when)

    def should_undone(self, today: date | None = None) -> bool:
        """Whether a stored done flag must be cleared when loading."""
        today = today or dates.today()
        if self.type == ScheduleType.REMINDER:
            return self.when == today
        if self.type == ScheduleType.RECURRING:
            return self.days_since(today) >= self.period_days
        return False

    def should_done(self, today: date | None = None) -> bool:
        if self.type == ScheduleType.REMINDER:
            return self.when != (today or dates.today())
        return False

    def stamp_today(self, today: date | None = None) -> None:
        """Restart the recurring clock. Reminder target dates are left alone."""
        if self.type != ScheduleType.REMINDER:
            self.when = today or dates.today()

    def toggle(self) -> None:
        """Disable the schedule, or restore the one that was disabled."""
        if self.type == ScheduleType.NONE:
            self.type = self.last_type
        else:
            self.last_type = self.type
            self.type = ScheduleType.NONE

    def set_period(self, days: int) -> None:
        self.type = ScheduleType.RECURRING
        self.period_days = days

    def set_daily(self) -> None:
        self.set_period(1)

    def set_weekly(self) -> None:
        self.set_period(7)

    def toggle_period(self, days: int) -> None:
        """Turn a recurring schedule with this period on or off."""
        if self.type == ScheduleType.RECURRING and self.period_days == days:
            self.toggle()
        else:
            self.set_period(days)

    def enable_reminder(self, target_date: date) -> None:
        self.type = ScheduleType.REMINDER
        self.when = target_date

    def shift_date(self, days: int, today: date | None = None) -> None:
        """Move the stored date, refusing to push it past today."""
        if self.when is None:
            return
        if days <= self.days_since(today):
            self.when = dates.add_days(self.when, days)

    def display(self, today: date | None = None) -> str:
        if self.type == ScheduleType.REMINDER:
            return self._display_reminder(today or dates.today())
        if self.type == ScheduleType.RECURRING:
            return self._display_recurring(today or dates.today())
        return ""

    def _display_reminder(self, today: date) -> str:
        date_str = dates.format_date(self.when)
        remaining = dates.diff_days(self.when, today)
        if remaining < 0:
            return f" (Reminder for {date_str} [{-remaining} days ago])"
        if remaining == 0:
            return f" (Reminder for today [{date_str}])"
        if remaining == 1:
            return f" (Reminder for tomorrow [{date_str}])"
        return f" (Reminder for {date_str} [{remaining} days])"

    def _display_recurring(self, today: date) -> str:
        elapsed = self.days_since(today)
        if elapsed == 0:
            last_done = ""
        elif elapsed == 1:
            last_done = ", last done yesterday"
        else:
            last_done = f", last done {elapsed} days ago"

        period = self.period_days
        if period == 1:
            return f" (Daily{last_done})"
        if period == 7:
            return f" (Weekly{last_done})"
        if period and period % 7 == 0:
            return f" (Each {period // 7} weeks{last_done})"
        return f" (Each {period} days{last_done})"
