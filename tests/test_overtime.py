"""Tests for off-duration accounting."""

from pomogate.timer.overtime import OvertimeLedger


def make_ledger():
    return OvertimeLedger(forgive_duration=8, overtime_duration=120)


class TestEarlyBreaks:

    def test_within_forgiveness_is_free(self):
        ledger = make_ledger()
        assert ledger.record_early_break(8) == 0.0
        assert ledger.off_duration == 0.0

    def test_beyond_forgiveness_charges_everything(self):
        ledger = make_ledger()
        assert ledger.record_early_break(15) == 15
        assert ledger.off_duration == 15

    def test_in_overtime_nothing_is_forgiven(self):
        ledger = make_ledger()
        ledger.grant_overtime()
        ledger.record_early_break(3)
        assert ledger.off_duration == 3


class TestOvertime:

    def test_offer_on_regular_break(self):
        assert make_ledger().overtime_offer(early=False) == 120

    def test_no_offer_on_early_break(self):
        assert make_ledger().overtime_offer(early=True) is None

    def test_no_offer_while_in_overtime(self):
        ledger = make_ledger()
        ledger.grant_overtime()
        assert ledger.overtime_offer(early=False) is None

    def test_overtime_work_is_charged(self):
        ledger = make_ledger()
        ledger.record_work(30)
        assert ledger.off_duration == 0.0
        ledger.grant_overtime()
        ledger.record_work(30)
        ledger.record_work(90)
        assert ledger.off_duration == 120


class TestBreakCompleted:

    def test_on_time_charges_nothing(self):
        ledger = make_ledger()
        assert ledger.record_break_completed(300, 300) == 0.0

    def test_small_overstay_forgiven(self):
        ledger = make_ledger()
        ledger.record_break_completed(307, 300)
        assert ledger.off_duration == 0.0

    def test_overstay_charged(self):
        ledger = make_ledger()
        ledger.record_break_completed(345, 300)
        assert ledger.off_duration == 45

    def test_completion_ends_overtime(self):
        ledger = make_ledger()
        ledger.grant_overtime()
        ledger.record_break_completed(302, 300)
        assert ledger.off_duration == 2
        assert not ledger.in_overtime
        assert ledger.overtime_offer(early=False) == 120


class TestDayTotals:

    def test_work_and_breaks_count_towards_the_day(self):
        ledger = make_ledger()
        ledger.record_work(1200)
        ledger.record_break_completed(330, 300)
        assert ledger.duration_today == 1530

    def test_zero_work_is_ignored(self):
        ledger = make_ledger()
        ledger.record_work(0.0)
        assert ledger.duration_today == 0.0

    def test_off_percentage(self):
        ledger = make_ledger()
        assert ledger.off_percentage == 0.0
        ledger.record_work(1200)
        ledger.record_early_break(15)
        ledger.record_break_completed(300, 300)
        assert ledger.off_percentage == 1.0

    def test_restore_and_reset(self):
        ledger = make_ledger()
        ledger.restore(off_duration=45, duration_today=900, in_overtime=True)
        assert ledger.off_duration == 45
        assert ledger.duration_today == 900
        assert ledger.in_overtime
        assert ledger.overtime_offer(early=False) is None

        ledger.reset()
        assert ledger.off_duration == 0.0
        assert ledger.duration_today == 0.0
        assert not ledger.in_overtime
