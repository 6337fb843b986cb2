"""Tests for the jqsh command line entry point."""

import pytest

from jqsh.cli.main import initial_commands


@pytest.fixture
def env():
    return {"JQSH_JQ": None, "JQSH_PAGER": None, "SHELL": "/bin/sh"}


def test_version(invoke):
    result = invoke(["--version"])
    assert result.exit_code == 0
    assert result.output.strip() == "jqsh 0.5.0"


def test_help(invoke):
    result = invoke(["--help"])
    assert result.exit_code == 0
    assert "Interactive shell for exploring JSON with jq" in result.output
    assert "--pager" in result.output


def test_jq_missing(invoke, env, tmp_path):
    env["PATH"] = str(tmp_path)
    result = invoke(["-q"], input_data="", env=env)
    assert result.exit_code == 1
    assert "Unable to locate the jq executable" in result.output


def test_jq_not_executable(invoke, env, tmp_path):
    result = invoke(["--jq", str(tmp_path / "nojq"), "-q"], input_data="", env=env)
    assert result.exit_code == 1
    assert "locating jq" in result.output


def test_jq_from_env(invoke, env, make_script):
    env["JQSH_JQ"] = make_script("impostor", "echo hello")
    result = invoke(["-q"], input_data="", env=env)
    assert result.exit_code == 1
    assert "doesn't look like jq" in result.output


def test_banner(invoke, env, fake_jq):
    result = invoke(["--jq", fake_jq], input_data="", env=env)
    assert result.exit_code == 0
    assert "Welcome to jqsh!" in result.output


def test_load_file_and_write(invoke, env, fake_jq, data_json, tmp_path):
    out = tmp_path / "out.json"
    result = invoke(
        ["--jq", fake_jq, "--pager", "cat", "-q", str(data_json)],
        input_data=f":write {out}\n:quit\n",
        env=env,
    )
    assert result.exit_code == 0
    assert out.read_bytes() == data_json.read_bytes()


def test_concatenates_files(invoke, env, fake_jq, tmp_path):
    first = tmp_path / "a.json"
    second = tmp_path / "b.json"
    first.write_text("1\n")
    second.write_text("2\n")
    out = tmp_path / "out.json"

    result = invoke(
        ["--jq", fake_jq, "--pager", "cat", "-q", str(first), str(second)],
        input_data=f":write {out}\n",
        env=env,
    )

    assert result.exit_code == 0
    assert out.read_text() == "1\n2\n"


def test_errors_do_not_stop_shell(invoke, env, fake_jq, tmp_path):
    out = tmp_path / "out.json"
    result = invoke(
        ["--jq", fake_jq, "--pager", "cat", "-q"],
        input_data=f":nope\n..\n:exec -q echo 7\n:write {out}\n",
        env=env,
    )
    assert result.exit_code == 0
    assert "nope: unknown command" in result.output
    assert "the stack is empty" in result.output
    assert out.read_text() == "7\n"


def test_initial_commands():
    assert initial_commands([]) == []
    assert initial_commands(["a.json"]) == [["load", "a.json"]]
    assert initial_commands(["a.json", "b c.json"]) == [
        ["pipe", "-c", "cat a.json 'b c.json'"]
    ]
