# pyright: reportAny=false, reportExplicitAny=false
"""Integration tests for the refine commands."""

from collections.abc import Callable
from typing import Any

import orjson
import pytest

from ideaflow.cli._shared import ExitCode
from ideaflow.enums import ComponentType
from ideaflow.idea import mock_component_variations

Cli = Callable[..., int]


def _document(cli: Cli, capsys: pytest.CaptureFixture[str], *args: str) -> dict[str, Any]:
    _ = capsys.readouterr()
    assert cli(*args, "refine", "show", "--json") == ExitCode.SUCCESS
    data: dict[str, Any] = orjson.loads(capsys.readouterr().out)
    return data


def _fill_basics(cli: Cli) -> None:
    assert cli("refine", "set", "title", "Coffee Club") == ExitCode.SUCCESS
    assert cli("refine", "set", "description", "Fresh beans delivered") == ExitCode.SUCCESS


class TestShow:
    def test_fresh_draft(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        data = _document(ideaflow_cli, capsys)

        assert data["step"] == 0
        assert data["document"]["title"] == ""
        assert data["document"]["id"] is None

    def test_renders_step_header(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "show") == ExitCode.SUCCESS

        out = capsys.readouterr().out
        assert "Step 1/5:" in out
        assert "Basic Info" in out

    def test_step_option_overrides_stored_step(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "goto", "2") == ExitCode.SUCCESS

        assert _document(ideaflow_cli, capsys, "--step", "3")["step"] == 3
        assert _document(ideaflow_cli, capsys)["step"] == 3

    def test_invalid_step_option_is_ignored(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "goto", "2") == ExitCode.SUCCESS

        assert _document(ideaflow_cli, capsys, "--step", "9")["step"] == 2


class TestEditing:
    def test_set_persists_between_invocations(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)

        document = _document(ideaflow_cli, capsys)["document"]
        assert document["title"] == "Coffee Club"
        assert document["description"] == "Fresh beans delivered"

    def test_set_unknown_field(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "set", "nickname", "x") == ExitCode.VALIDATION_ERROR

        assert "Unknown idea fields" in capsys.readouterr().err

    def test_drafts_are_per_user(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)

        assert ideaflow_cli("refine", "set", "title", "Tea", user="user-2") == 0

        _ = capsys.readouterr()
        assert ideaflow_cli("refine", "show", "--json", user="user-2") == 0
        other = orjson.loads(capsys.readouterr().out)
        assert other["document"]["title"] == "Tea"
        assert _document(ideaflow_cli, capsys)["document"]["title"] == "Coffee Club"

    def test_clear(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        _fill_basics(ideaflow_cli)

        assert ideaflow_cli("refine", "clear") == ExitCode.SUCCESS

        assert "Local draft cleared" in capsys.readouterr().out
        assert _document(ideaflow_cli, capsys)["document"]["title"] == ""


class TestNavigation:
    def test_next_blocked_without_basics(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "next") == ExitCode.VALIDATION_ERROR

        assert "Please provide a title and description" in capsys.readouterr().out

    def test_next_and_back(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        _fill_basics(ideaflow_cli)

        assert ideaflow_cli("refine", "next") == ExitCode.SUCCESS
        assert "Concept Variations" in capsys.readouterr().out
        assert ideaflow_cli("refine", "back") == ExitCode.SUCCESS
        assert "Basic Info" in capsys.readouterr().out

    def test_goto_rejects_out_of_range(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "goto", "9") == ExitCode.VALIDATION_ERROR

        assert "Invalid step: 9" in capsys.readouterr().err

    def test_continue_at_basic_info_fills_description(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "set", "title", "Coffee Club") == 0

        assert ideaflow_cli("refine", "continue") == ExitCode.SUCCESS

        data = _document(ideaflow_cli, capsys)
        assert data["step"] == 1
        assert data["document"]["description"] == "No description provided"

    def test_continue_at_last_step(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "goto", "4") == 0

        assert ideaflow_cli("refine", "continue") == ExitCode.VALIDATION_ERROR
        assert "This is the last step" in capsys.readouterr().err


class TestGeneration:
    def test_feedback_uses_fallback_without_remote(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)
        _ = capsys.readouterr()

        assert ideaflow_cli("refine", "feedback") == ExitCode.SUCCESS

        out = capsys.readouterr().out
        assert "using fallback data" in out
        assert "Coffee Club has a clear value proposition" in out

    def test_feedback_needs_input(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "feedback") == ExitCode.VALIDATION_ERROR

        assert "Please provide either a title or description" in capsys.readouterr().out

    def test_full_walkthrough(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)
        assert ideaflow_cli("refine", "next") == 0
        assert ideaflow_cli("refine", "variations") == 0

        document = _document(ideaflow_cli, capsys)["document"]
        variations = document["concept_variations"]
        assert len(variations) == 5
        assert variations[0]["title"] == "Premium Coffee Club"

        assert ideaflow_cli("refine", "select", variations[0]["id"]) == 0
        assert ideaflow_cli("refine", "continue") == 0
        assert ideaflow_cli("refine", "suggest") == 0
        assert ideaflow_cli("refine", "toggle", "pricing_model", "Freemium") == 0
        assert ideaflow_cli("refine", "toggle", "sales_channels", "Direct Sales") == 0
        assert ideaflow_cli("refine", "next") == 0
        assert ideaflow_cli("refine", "apply-suggestions") == 0

        data = _document(ideaflow_cli, capsys)
        document = data["document"]
        assert data["step"] == 3
        assert document["title"] == "Premium Coffee Club"
        assert document["target_audience"] == variations[0]["targetMarket"]
        assert document["selected_variation"]["id"] == variations[0]["id"]
        assert document["selected_suggestions"]["pricing_model"] == ["Freemium"]
        assert document["business_model"] == "Freemium model targeting customers"
        assert document["marketing_strategy"] == "Marketing through Direct Sales"

    def test_merge_needs_two(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        _fill_basics(ideaflow_cli)
        assert ideaflow_cli("refine", "variations") == 0
        first = _document(ideaflow_cli, capsys)["document"]["concept_variations"][0]["id"]

        assert ideaflow_cli("refine", "merge", first) == ExitCode.VALIDATION_ERROR

        assert "at least two variations" in capsys.readouterr().out

    def test_merge(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        _fill_basics(ideaflow_cli)
        assert ideaflow_cli("refine", "variations") == 0
        variations = _document(ideaflow_cli, capsys)["document"]["concept_variations"]

        assert ideaflow_cli("refine", "merge", variations[0]["id"], variations[1]["id"]) == 0

        assert "Merged: Premium + Budget" in capsys.readouterr().out
        merged = _document(ideaflow_cli, capsys)["document"]["merged_variation"]
        assert merged["title"] == "Merged: Premium + Budget"

    def test_merge_unknown_variation(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)
        assert ideaflow_cli("refine", "variations") == 0
        first = _document(ideaflow_cli, capsys)["document"]["concept_variations"][0]["id"]

        assert ideaflow_cli("refine", "merge", first, "bogus") == ExitCode.NOT_FOUND

        captured = capsys.readouterr()
        assert "No variation with id bogus" in captured.err
        assert "at least two" not in captured.out
        assert _document(ideaflow_cli, capsys)["document"]["merged_variation"] is None

    def test_select_unknown_variation(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        assert ideaflow_cli("refine", "select", "nope") == ExitCode.NOT_FOUND

        assert "No variation with id nope" in capsys.readouterr().err

    def test_components_pick(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)

        assert ideaflow_cli("refine", "components", "problem_statement", "--pick", "2") == 0

        expected = mock_component_variations(ComponentType.PROBLEM_STATEMENT)[1].text
        document = _document(ideaflow_cli, capsys)["document"]
        assert document["problem_statement"] == expected


class TestSave:
    def test_requires_user(self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]) -> None:
        assert ideaflow_cli("refine", "set", "title", "Coffee", user=None) == 0

        assert ideaflow_cli("refine", "save", user=None) == ExitCode.REMOTE_ERROR

        assert "You must be logged in" in capsys.readouterr().out

    def test_without_remote_keeps_local_draft(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)
        _ = capsys.readouterr()

        assert ideaflow_cli("refine", "save") == ExitCode.REMOTE_ERROR

        assert "Error saving idea" in capsys.readouterr().out
        document = _document(ideaflow_cli, capsys)["document"]
        assert document["title"] == "Coffee Club"
        assert document["id"] is None

    def test_repeated_failures_show_technical_details(
        self, ideaflow_cli: Cli, capsys: pytest.CaptureFixture[str]
    ) -> None:
        _fill_basics(ideaflow_cli)

        for _ in range(2):
            _ = capsys.readouterr()
            assert ideaflow_cli("refine", "save") == ExitCode.REMOTE_ERROR
            output = capsys.readouterr().out
            assert "Error saving idea" in output
            assert "Persistent error" not in output

        assert ideaflow_cli("refine", "save") == ExitCode.REMOTE_ERROR

        output = capsys.readouterr().out
        assert "Persistent error saving to database" in output
        assert "Technical" in output
