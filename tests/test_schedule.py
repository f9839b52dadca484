"""Tests for the Schedule value type."""

from datetime import date

import pytest

from todotree.todos.schedule import Schedule, ScheduleType

TODAY = date(2024, 5, 10)


class TestParse:
    """Tests for parsing schedule text."""

    def test_recurring(self):
        schedule = Schedule.parse("D3(2024-05-01)")
        assert schedule.type == ScheduleType.RECURRING
        assert schedule.period_days == 3
        assert schedule.last_done == date(2024, 5, 1)

    def test_reminder(self):
        schedule = Schedule.parse("R(2024-06-01)")
        assert schedule.is_reminder
        assert schedule.target_date == date(2024, 6, 1)

    def test_empty_date(self):
        schedule = Schedule.parse("D1()")
        assert schedule.is_recurring
        assert schedule.when is None

    def test_invalid_date_is_none(self):
        assert Schedule.parse("R(2024-13-45)").when is None

    @pytest.mark.parametrize("text", ["", "milk", "D(2024-01-01)", "X3(2024-01-01)"])
    def test_other_text_is_no_schedule(self, text):
        assert Schedule.parse(text).is_none


class TestSplitMessage:
    def test_strips_schedule_suffix(self):
        rest, schedule = Schedule.split_message("water plants [D3(2024-05-01)]")
        assert rest == "water plants"
        assert schedule == Schedule.recurring(3, date(2024, 5, 1))

    def test_keeps_non_schedule_brackets(self):
        rest, schedule = Schedule.split_message("buy [milk]")
        assert rest == "buy [milk]"
        assert schedule.is_none

    def test_no_brackets(self):
        assert Schedule.split_message("call bob") == ("call bob", Schedule())


class TestEncode:
    def test_recurring(self):
        assert Schedule.recurring(7, date(2024, 1, 31)).encode() == " [D7(2024-01-31)]"

    def test_reminder(self):
        assert Schedule.reminder(date(2024, 2, 14)).encode() == " [R(2024-02-14)]"

    def test_reminder_without_date(self):
        assert Schedule.reminder(None).encode() == " [R()]"

    def test_none(self):
        assert Schedule().encode() == ""


class TestDueRules:
    """Tests for should_undone / should_done."""

    def test_recurring_due_when_period_elapsed(self):
        schedule = Schedule.recurring(3, date(2024, 5, 7))
        assert schedule.should_undone(TODAY)

    def test_recurring_not_due_before_period(self):
        schedule = Schedule.recurring(4, date(2024, 5, 7))
        assert not schedule.should_undone(TODAY)

    def test_reminder_due_on_target_date(self):
        assert Schedule.reminder(TODAY).should_undone(TODAY)
        assert not Schedule.reminder(date(2024, 5, 11)).should_undone(TODAY)

    def test_reminder_should_done_on_other_days(self):
        assert Schedule.reminder(date(2024, 5, 11)).should_done(TODAY)
        assert not Schedule.reminder(TODAY).should_done(TODAY)

    def test_none_is_never_due(self):
        assert not Schedule().should_undone(TODAY)
        assert not Schedule().should_done(TODAY)


class TestMutation:
    def test_stamp_today_restarts_recurring_clock(self):
        schedule = Schedule.recurring(3, date(2024, 5, 1))
        schedule.stamp_today(TODAY)
        assert schedule.last_done == TODAY

    def test_stamp_today_keeps_reminder_target(self):
        schedule = Schedule.reminder(date(2024, 6, 1))
        schedule.stamp_today(TODAY)
        assert schedule.target_date == date(2024, 6, 1)

    def test_toggle_restores_previous_type(self):
        schedule = Schedule.recurring(5, TODAY)
        schedule.toggle()
        assert schedule.is_none
        schedule.toggle()
        assert schedule.is_recurring
        assert schedule.period_days == 5

    def test_toggle_period(self):
        schedule = Schedule()
        schedule.toggle_period(7)
        assert schedule.is_recurring and schedule.period_days == 7
        schedule.toggle_period(7)
        assert schedule.is_none
        schedule.toggle_period(1)
        assert schedule.period_days == 1

    def test_set_daily_and_weekly(self):
        schedule = Schedule()
        schedule.set_daily()
        assert schedule.period_days == 1
        schedule.set_weekly()
        assert schedule.period_days == 7

    def test_enable_reminder(self):
        schedule = Schedule.recurring(3, TODAY)
        schedule.enable_reminder(date(2024, 7, 1))
        assert schedule.target_date == date(2024, 7, 1)

    def test_shift_date_refuses_future(self):
        schedule = Schedule.recurring(3, date(2024, 5, 8))
        schedule.shift_date(3, TODAY)
        assert schedule.when == date(2024, 5, 8)
        schedule.shift_date(2, TODAY)
        assert schedule.when == TODAY
        schedule.shift_date(-4, TODAY)
        assert schedule.when == date(2024, 5, 6)


class TestDisplay:
    @pytest.mark.parametrize(
        ("schedule", "expected"),
        [
            (Schedule.recurring(1, TODAY), " (Daily)"),
            (Schedule.recurring(7, date(2024, 5, 9)), " (Weekly, last done yesterday)"),
            (Schedule.recurring(21, TODAY), " (Each 3 weeks)"),
            (
                Schedule.recurring(5, date(2024, 5, 6)),
                " (Each 5 days, last done 4 days ago)",
            ),
            (Schedule.reminder(TODAY), " (Reminder for today [2024-05-10])"),
            (
                Schedule.reminder(date(2024, 5, 11)),
                " (Reminder for tomorrow [2024-05-11])",
            ),
            (
                Schedule.reminder(date(2024, 5, 15)),
                " (Reminder for 2024-05-15 [5 days])",
            ),
            (
                Schedule.reminder(date(2024, 5, 8)),
                " (Reminder for 2024-05-08 [2 days ago])",
            ),
            (Schedule(), ""),
        ],
    )
    def test_display(self, schedule, expected):
        assert schedule.display(TODAY) == expected
