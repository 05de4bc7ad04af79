from datetime import date, datetime, timedelta, timezone

from timesheet_kernel.domain.clock import DeterministicClock, SystemClock


class TestDeterministicClock:
    def test_frozen_until_moved(self):
        clock = DeterministicClock(datetime(2026, 3, 5, 23, 30, tzinfo=timezone.utc))
        assert clock.now() == clock.now()
        clock.advance(timedelta(hours=1))
        assert clock.now() == datetime(2026, 3, 6, 0, 30, tzinfo=timezone.utc)

    def test_today_depends_on_zone(self):
        clock = DeterministicClock(datetime(2026, 3, 5, 23, 30, tzinfo=timezone.utc))
        assert clock.today() == date(2026, 3, 5)
        assert clock.today("Asia/Bangkok") == date(2026, 3, 6)

    def test_set_time(self):
        clock = DeterministicClock()
        clock.set_time(datetime(2026, 4, 1, tzinfo=timezone.utc))
        assert clock.today() == date(2026, 4, 1)


def test_system_clock_is_aware():
    assert SystemClock().now().tzinfo is not None
