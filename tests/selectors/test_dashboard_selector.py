"""
Dashboard statistics, team view and filter pick lists.

The deterministic clock sits on 2026-03-10, so "this month" is March 2026
(22 weekdays) and "last month" is February 2026.
"""

from datetime import date, timedelta
from decimal import Decimal

import pytest

from timesheet_kernel.domain.calendar import each_day
from timesheet_kernel.domain.dtos import Role, TimesheetPolicy
from timesheet_kernel.exceptions import NotAuthenticatedError
from timesheet_kernel.models.timesheet_entry import TimesheetEntry
from timesheet_kernel.selectors.dashboard_selector import DashboardSelector
from timesheet_kernel.selectors.holiday_selector import HolidaySelector
from timesheet_kernel.selectors.project_selector import ProjectSelector


@pytest.fixture
def add_entry(session):
    def _add(actor, project, day, hours, description=""):
        session.add(
            TimesheetEntry(
                user_id=actor.id,
                project_id=project.id,
                entry_date=day,
                hours=Decimal(hours),
                description=description,
            )
        )
        session.flush()

    return _add


@pytest.fixture
def org(make_actor, make_project, assign, add_entry):
    dev = make_actor(Role.DEV, name="Alice")
    other = make_actor(Role.DEV, name="Bob")
    pm = make_actor(Role.PM, name="Pat")
    gm = make_actor(Role.GM, name="Gale")
    apollo = make_project("APO", "Apollo", budget="50000")
    gemini = make_project("GEM", "Gemini", budget="20000")
    assign(pm.id, apollo.id)
    assign(dev.id, apollo.id)
    assign(other.id, gemini.id)

    add_entry(dev, apollo, date(2026, 3, 2), "4", "design")
    add_entry(dev, gemini, date(2026, 3, 3), "3", "review")
    add_entry(dev, apollo, date(2026, 2, 10), "6", "planning")
    add_entry(other, gemini, date(2026, 3, 4), "7")
    add_entry(pm, apollo, date(2026, 3, 5), "2")

    return {"dev": dev, "other": other, "pm": pm, "gm": gm, "apollo": apollo, "gemini": gemini}


@pytest.fixture
def dashboard(session, deterministic_clock, policy):
    return DashboardSelector(session, clock=deterministic_clock, policy=policy)


class TestDashboardStats:
    def test_requires_actor(self, dashboard):
        with pytest.raises(NotAuthenticatedError):
            dashboard.get_dashboard_stats(None)

    def test_personal_figures(self, dashboard, org, make_holiday):
        make_holiday(date(2026, 3, 9), "Founders Day")
        make_holiday(date(2026, 3, 14), "Weekend holiday")

        stats = dashboard.get_dashboard_stats(org["dev"])

        assert stats.total_hours_month == Decimal("7")
        assert stats.total_hours_prev_month == Decimal("6")
        assert stats.workable_hours_month == Decimal("147")
        assert [(p.code, p.hours) for p in stats.top_projects] == [
            ("APO", Decimal("4")),
            ("GEM", Decimal("3")),
        ]
        assert [a.entry_date for a in stats.recent_activity] == [
            date(2026, 3, 3),
            date(2026, 3, 2),
            date(2026, 2, 10),
        ]
        assert stats.recent_activity[0].project_code == "GEM"
        assert stats.project_status is None

    def test_figures_are_personal_for_managers(self, dashboard, org):
        stats = dashboard.get_dashboard_stats(org["gm"])
        assert stats.total_hours_month == Decimal("0")
        assert stats.top_projects == ()
        assert stats.recent_activity == ()

    def test_pm_budget_status_only_assigned(self, dashboard, org):
        stats = dashboard.get_dashboard_stats(org["pm"])
        assert [s.code for s in stats.project_status] == ["APO"]
        apollo = stats.project_status[0]
        assert apollo.used_hours == Decimal("12")
        assert apollo.used_budget == Decimal("6000")
        assert apollo.budget == Decimal("50000")

    def test_gm_budget_status_all_projects(self, dashboard, org):
        stats = dashboard.get_dashboard_stats(org["gm"])
        assert [s.code for s in stats.project_status] == ["APO", "GEM"]
        assert stats.project_status[1].used_hours == Decimal("10")

    def test_recent_activity_limit(self, dashboard, org, add_entry):
        for offset in range(8):
            add_entry(org["dev"], org["apollo"], date(2026, 1, 5) + timedelta(days=offset), "1")
        stats = dashboard.get_dashboard_stats(org["dev"])
        assert len(stats.recent_activity) == 5


class TestTeamData:
    def test_requires_actor(self, dashboard):
        with pytest.raises(NotAuthenticatedError):
            dashboard.get_team_data(None, date(2026, 3, 1))

    def test_dev_gets_nothing(self, dashboard, org):
        data = dashboard.get_team_data(org["dev"], date(2026, 3, 1))
        assert data.users == ()
        assert data.entries == ()

    def test_pm_scoped_to_assigned_projects(self, dashboard, org):
        data = dashboard.get_team_data(org["pm"], date(2026, 3, 15))

        assert {u.name for u in data.users} == {"Alice", "Pat"}
        assert {e.project_code for e in data.entries} == {"APO"}
        assert [e.entry_date for e in data.entries] == [date(2026, 3, 5), date(2026, 3, 2)]

    def test_pm_user_stats_count_all_projects(self, dashboard, org):
        data = dashboard.get_team_data(org["pm"], date(2026, 3, 15))
        alice = next(u for u in data.users if u.name == "Alice")
        assert alice.total_hours == Decimal("7")
        assert alice.workable_hours == Decimal("154")
        assert not alice.is_complete
        assert alice.percentage == Decimal("4.55")

    def test_pm_out_of_scope_filters_are_empty(self, dashboard, org):
        by_user = dashboard.get_team_data(org["pm"], date(2026, 3, 1), user_id=org["other"].id)
        by_project = dashboard.get_team_data(
            org["pm"], date(2026, 3, 1), project_id=org["gemini"].id
        )
        assert by_user.users == () and by_user.entries == ()
        assert by_project.users == () and by_project.entries == ()

    def test_gm_project_filter(self, dashboard, org):
        data = dashboard.get_team_data(org["gm"], date(2026, 3, 1), project_id=org["gemini"].id)
        assert [u.name for u in data.users] == ["Bob"]
        assert {e.project_code for e in data.entries} == {"GEM"}

    def test_users_sorted_by_percentage_and_capped(self, dashboard, org, add_entry):
        for day in each_day(date(2026, 3, 1), date(2026, 3, 31)):
            if day != date(2026, 3, 4):
                add_entry(org["other"], org["gemini"], day, "7")

        data = dashboard.get_team_data(org["gm"], date(2026, 3, 1))

        assert data.users[0].name == "Bob"
        assert data.users[0].percentage == Decimal("100")
        assert data.users[0].is_complete
        percentages = [u.percentage for u in data.users]
        assert percentages == sorted(percentages, reverse=True)

    def test_entries_limited(self, session, deterministic_clock, org, add_entry):
        for day in each_day(date(2026, 3, 10), date(2026, 3, 20)):
            add_entry(org["other"], org["gemini"], day, "1")
        selector = DashboardSelector(
            session, clock=deterministic_clock, policy=TimesheetPolicy(team_entries_limit=3)
        )
        data = selector.get_team_data(org["gm"], date(2026, 3, 1))
        assert len(data.entries) == 3
        assert data.entries[0].entry_date == date(2026, 3, 20)


class TestFilters:
    def test_no_actor_and_dev_get_empty(self, dashboard, org):
        assert dashboard.get_filters(None).users == ()
        dev_filters = dashboard.get_filters(org["dev"])
        assert dev_filters.users == () and dev_filters.projects == ()

    def test_pm_filters(self, dashboard, org):
        filters = dashboard.get_filters(org["pm"])
        assert [p.code for p in filters.projects] == ["APO"]
        assert [u.name for u in filters.users] == ["Alice", "Pat"]

    def test_gm_filters(self, dashboard, org):
        filters = dashboard.get_filters(org["gm"])
        assert [p.code for p in filters.projects] == ["APO", "GEM"]
        assert len(filters.users) == 4


class TestProjectSelector:
    def test_no_actor(self, session):
        assert ProjectSelector(session).get_assigned_projects(None) == []

    def test_dev_and_pm_get_assigned(self, session, org):
        selector = ProjectSelector(session)
        assert [p.code for p in selector.get_assigned_projects(org["dev"])] == ["APO"]
        assert [p.code for p in selector.get_assigned_projects(org["pm"])] == ["APO"]

    def test_gm_gets_all(self, session, org):
        projects = ProjectSelector(session).get_assigned_projects(org["gm"])
        assert [p.code for p in projects] == ["APO", "GEM"]
        assert projects[0].name == "Apollo"

    def test_unassigned_dev_gets_none(self, session, make_actor, org):
        assert ProjectSelector(session).get_assigned_projects(make_actor(Role.DEV)) == []


class TestHolidaySelector:
    def test_by_year_and_range(self, session, make_holiday):
        make_holiday(date(2026, 12, 25), "Christmas")
        make_holiday(date(2026, 1, 1), "New Year")
        make_holiday(date(2027, 1, 1), "New Year")
        selector = HolidaySelector(session)

        assert [h.name for h in selector.get_holidays(2026)] == ["New Year", "Christmas"]
        between = selector.get_holidays_between(date(2026, 12, 1), date(2027, 1, 1))
        assert [h.holiday_date for h in between] == [date(2026, 12, 25), date(2027, 1, 1)]
