"""Tests for API record models."""

from __future__ import annotations

import pydantic
import pytest

from asanakit.models import ErrorDetail, Filter, Project, TaskUpdate, Team, Webhook


class TestErrorDetail:
    def test_str_is_message_then_phrase(self):
        assert str(ErrorDetail(phrase="P", message="M")) == "M - P"


class TestEntities:
    def test_frozen(self):
        project = Project(id=1, name="Project 1")
        with pytest.raises(pydantic.ValidationError):
            project.name = "Renamed"

    def test_defaults_are_zero_like(self):
        webhook = Webhook()
        assert webhook.id == 0
        assert webhook.target == ""
        assert webhook.active is False
        assert webhook.resource.name == ""

    def test_nested_team_decoded(self):
        project = Project.model_validate(
            {"id": 1, "name": "Project 1", "team": {"gid": "3232", "name": "Team 1"}}
        )
        assert project.team == Team(gid="3232", name="Team 1")


class TestTaskUpdate:
    def test_only_set_fields_sent(self):
        assert TaskUpdate(notes="updated notes").to_payload() == {
            "data": {"notes": "updated notes"}
        }

    def test_false_is_sent(self):
        assert TaskUpdate(completed=False).to_payload() == {"data": {"completed": False}}

    def test_empty_update(self):
        assert TaskUpdate().to_payload() == {"data": {}}


class TestFilter:
    def test_empty_filter_has_no_params(self):
        assert Filter().to_params() == {}

    def test_lists_joined_with_commas(self):
        params = Filter(opt_fields=["name", "notes"], opt_expand=["assignee"]).to_params()
        assert params == {"opt_fields": "name,notes", "opt_expand": "assignee"}

    def test_scalar_values_stringified(self):
        params = Filter(workspace=12, project=34, assignee=56, archived=True, limit=50).to_params()
        assert params == {
            "workspace": "12",
            "project": "34",
            "assignee": "56",
            "archived": "true",
            "limit": "50",
        }

    def test_offset_passed_through(self):
        assert Filter(offset="eyJ0eXAi").to_params() == {"offset": "eyJ0eXAi"}
