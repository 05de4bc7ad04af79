"""
Visibility scope resolution by role, with filters intersected.
"""

from uuid import uuid4

import pytest

from timesheet_kernel.domain.dtos import Actor, Role
from timesheet_kernel.domain.scope import (
    EMPTY_SCOPE,
    VisibilityScope,
    resolve_entry_scope,
    resolve_project_scope,
    resolve_team_scope,
)


@pytest.fixture
def ids():
    return {name: uuid4() for name in ("me", "other", "p1", "p2", "p3")}


class TestEntryScope:
    def test_dev_sees_only_own_entries(self, ids):
        scope = resolve_entry_scope(Actor(ids["me"], Role.DEV), [ids["p1"]])
        assert scope.user_ids == frozenset({ids["me"]})
        assert scope.project_ids is None

    def test_dev_cannot_filter_onto_another_user(self, ids):
        scope = resolve_entry_scope(Actor(ids["me"], Role.DEV), user_id=ids["other"])
        assert scope.is_empty

    def test_pm_sees_assigned_projects(self, ids):
        scope = resolve_entry_scope(Actor(ids["me"], "PM"), [ids["p1"], ids["p2"]])
        assert scope.project_ids == frozenset({ids["p1"], ids["p2"]})
        assert scope.user_ids is None

    def test_pm_filter_on_unassigned_project_is_empty(self, ids):
        scope = resolve_entry_scope(
            Actor(ids["me"], Role.PM), [ids["p1"]], project_id=ids["p3"]
        )
        assert scope.is_empty

    def test_pm_filter_on_assigned_project_narrows(self, ids):
        scope = resolve_entry_scope(
            Actor(ids["me"], Role.PM), [ids["p1"], ids["p2"]], project_id=ids["p2"]
        )
        assert scope.project_ids == frozenset({ids["p2"]})

    @pytest.mark.parametrize("role", [Role.GM, Role.ADMIN])
    def test_gm_and_admin_unrestricted(self, ids, role):
        scope = resolve_entry_scope(Actor(ids["me"], role))
        assert scope.is_unrestricted
        assert scope.allows(ids["other"], ids["p3"])

    def test_filters_narrow_unrestricted(self, ids):
        scope = resolve_entry_scope(
            Actor(ids["me"], Role.ADMIN), user_id=ids["other"], project_id=ids["p1"]
        )
        assert scope.allows(ids["other"], ids["p1"])
        assert not scope.allows(ids["me"], ids["p1"])
        assert not scope.allows(ids["other"], ids["p2"])


class TestProjectScope:
    @pytest.mark.parametrize("role", [Role.DEV, Role.PM])
    def test_assigned_only(self, ids, role):
        assert resolve_project_scope(Actor(ids["me"], role), [ids["p1"]]) == frozenset({ids["p1"]})

    @pytest.mark.parametrize("role", [Role.GM, Role.ADMIN])
    def test_all_projects(self, ids, role):
        assert resolve_project_scope(Actor(ids["me"], role), [ids["p1"]]) is None


class TestTeamScope:
    def test_dev_has_no_team_view(self, ids):
        assert resolve_team_scope(Actor(ids["me"], Role.DEV)) == EMPTY_SCOPE

    def test_pm_user_filter_outside_team_is_empty(self, ids):
        scope = resolve_team_scope(
            Actor(ids["me"], Role.PM), [ids["p1"]], [ids["me"]], user_id=ids["other"]
        )
        assert scope.is_empty

    def test_pm_user_filter_inside_team(self, ids):
        scope = resolve_team_scope(
            Actor(ids["me"], Role.PM), [ids["p1"]], [ids["other"]], user_id=ids["other"]
        )
        assert scope.user_ids == frozenset({ids["other"]})
        assert scope.project_ids == frozenset({ids["p1"]})

    def test_gm_unrestricted(self, ids):
        assert resolve_team_scope(Actor(ids["me"], Role.GM)).is_unrestricted


class TestVisibilityScope:
    def test_empty_scope_allows_nothing(self, ids):
        assert EMPTY_SCOPE.is_empty
        assert not EMPTY_SCOPE.allows(ids["me"], ids["p1"])

    def test_restrict_intersects(self, ids):
        scope = VisibilityScope(project_ids=frozenset({ids["p1"], ids["p2"]}))
        assert scope.restrict_projects({ids["p2"], ids["p3"]}).project_ids == frozenset({ids["p2"]})
