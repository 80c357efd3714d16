"""
CLI tests.
"""

import json

import pytest
from click.testing import CliRunner

from querybuilder.cli.main import main
from querybuilder.cli.render import render_tree


@pytest.fixture
def runner():
    return CliRunner()


def write_json(path, value):
    path.write_text(json.dumps(value))
    return str(path)


class TestRender:
    """Tests for the outline renderer"""

    def test_outline(self):
        snapshot = {
            "id": "g-0",
            "combinator": "OR",
            "rules": [
                {"id": "r-0", "field": "twitter", "operator": ">", "value": "x"},
                {"id": "g-1", "combinator": "", "rules": []},
            ],
        }
        assert render_tree(snapshot).splitlines() == [
            "[g-0] OR (2)",
            "  [r-0] twitter > 'x'",
            "  [g-1] _ (0)",
        ]

    def test_marks_unlisted_values(self):
        snapshot = {"id": "r-0", "field": "shoe", "operator": "", "value": ""}
        assert render_tree(snapshot) == "[r-0] shoe? _ ''"


class TestShow:
    """Tests for the show command"""

    def test_empty_tree_json(self, runner):
        result = runner.invoke(main, ["show", "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output) == {"id": "g-0", "combinator": "AND", "rules": []}

    def test_demo(self, runner):
        result = runner.invoke(main, ["show", "--demo"])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "[g-0] OR (1)",
            "  [r-0] twitter > 'twitter twitter'",
        ]

    def test_initial_file(self, runner, tmp_path):
        initial = write_json(tmp_path / "tree.json", {"combinator": "AND", "rules": [
            {"field": "name", "value": "bob", "operator": "="},
        ]})
        result = runner.invoke(main, ["--id-start", "7", "show", initial])
        assert result.exit_code == 0
        assert "[r-7] name = 'bob'" in result.output

    def test_malformed_initial_file(self, runner, tmp_path):
        initial = write_json(tmp_path / "tree.json", {"field": "name"})
        result = runner.invoke(main, ["show", "--json", initial])
        assert result.exit_code == 0
        assert "\"rules\": []" in result.output

    def test_invalid_json(self, runner, tmp_path):
        initial = tmp_path / "tree.json"
        initial.write_text("{not json")
        result = runner.invoke(main, ["show", str(initial)])
        assert result.exit_code == 2

    def test_initial_and_demo_conflict(self, runner, tmp_path):
        initial = write_json(tmp_path / "tree.json", {"combinator": "AND", "rules": []})
        result = runner.invoke(main, ["show", "--demo", initial])
        assert result.exit_code == 2

    def test_equal_marks_rejected(self, runner):
        result = runner.invoke(main, ["--group-mark", "n", "--rule-mark", "n", "show"])
        assert result.exit_code == 2
        assert "different marks" in result.output

    def test_version(self, runner):
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestApply:
    """Tests for the apply command"""

    def test_replay(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", [
            {"op": "add", "parent": "g-0", "kind": "rule"},
            {"op": "add", "parent": "g-0", "kind": "group"},
            {"op": "modify", "node": "r-0", "field": "field", "value": "phone"},
            {"op": "modify", "node": "g-1", "field": "combinator", "value": "OR"},
            {"op": "remove", "node": "missing"},
        ])
        result = runner.invoke(main, ["apply", "--json", script])
        assert result.exit_code == 0
        assert json.loads(result.output) == {
            "id": "g-0",
            "combinator": "AND",
            "rules": [
                {"id": "r-0", "field": "phone", "operator": "", "value": ""},
                {"id": "g-1", "combinator": "OR", "rules": []},
            ],
        }

    def test_replay_on_demo(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", [{"op": "remove", "node": "r-0"}])
        result = runner.invoke(main, ["apply", "--demo", script])
        assert result.exit_code == 0
        assert result.output.splitlines() == ["[g-0] OR (0)"]

    def test_trace(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", [
            {"op": "add", "parent": "g-0", "kind": "rule"},
            {"op": "remove", "node": "r-0"},
        ])
        result = runner.invoke(main, ["apply", "--trace", script])
        assert result.exit_code == 0
        assert result.output.splitlines() == [
            "# after 1: add",
            "[g-0] AND (1)",
            "  [r-0] _ _ ''",
            "# after 2: remove",
            "[g-0] AND (0)",
        ]

    def test_script_must_be_a_list(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", {"op": "add"})
        result = runner.invoke(main, ["apply", script])
        assert result.exit_code == 2

    def test_unknown_op(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", [{"op": "rename", "node": "g-0"}])
        result = runner.invoke(main, ["apply", script])
        assert result.exit_code == 1
        assert "operation 1" in result.output

    def test_missing_arguments(self, runner, tmp_path):
        script = write_json(tmp_path / "ops.json", [{"op": "modify", "node": "g-0"}])
        result = runner.invoke(main, ["apply", script])
        assert result.exit_code == 1
        assert "missing field, value" in result.output


class TestEdit:
    """Tests for the interactive editor"""

    def test_session(self, runner):
        commands = "\n".join([
            "add g-0 rule",
            "set r-0 field twitter",
            'set r-0 value "hello world"',
            "quit",
        ]) + "\n"
        result = runner.invoke(main, ["edit"], input=commands)
        assert result.exit_code == 0
        assert "  [r-0] twitter _ 'hello world'" in result.output

    def test_remove(self, runner):
        result = runner.invoke(main, ["edit", "--demo"], input="rm r-0\nquit\n")
        assert result.exit_code == 0
        assert "[g-0] OR (0)" in result.output

    def test_unlisted_value_noted(self, runner):
        result = runner.invoke(main, ["edit"], input="add g-0 rule\nset r-0 field shoe\n")
        assert result.exit_code == 0
        assert "not a listed field" in result.output
        assert "[r-0] shoe? _ ''" in result.output

    def test_bad_command_prints_help(self, runner):
        result = runner.invoke(main, ["edit"], input="frobnicate\nquit\n")
        assert result.exit_code == 0
        assert result.output.count("Commands:") == 2

    def test_ends_on_eof(self, runner):
        result = runner.invoke(main, ["edit"], input="")
        assert result.exit_code == 0
