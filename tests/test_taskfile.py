from datetime import timedelta

import pytest
from packaging.version import Version

from taskdef.taskfile import Taskfile, parse_duration, parse_version
from taskdef.variables import Var, Vars
from taskdef.yamlnodes import YamlDecodeError, parse

DOCUMENT = """
version: '3'
output: prefixed
method: checksum
set: [pipefail]
shopt: [globstar]
silent: true
dotenv: ['.env']
run: once
interval: 500ms
includes:
  docs: ./docs
  lib:
    taskfile: ./lib
    optional: true
vars:
  GREETING: hello
env:
  MODE: dev
tasks:
  build: go build
  test:
    cmds: [go test]
"""


def test_parse_version_equivalence():
    assert parse_version("3") == Version("3")
    assert parse_version("3") == parse_version("3.0.0")
    assert parse_version("2") < parse_version("3")


def test_parse_version_invalid():
    with pytest.raises(YamlDecodeError):
        parse_version("not a version")


@pytest.mark.parametrize(
    "text, expected",
    [
        ("500ms", timedelta(milliseconds=500)),
        ("0", timedelta(0)),
        ("2s", timedelta(seconds=2)),
        ("1m30s", timedelta(minutes=1, seconds=30)),
        ("-1.5h", -timedelta(hours=1.5)),
    ],
)
def test_parse_duration(text, expected):
    assert parse_duration(text) == expected


@pytest.mark.parametrize("text", ["", "5", "abc", "1x", ".s", "-"])
def test_parse_duration_invalid(text):
    with pytest.raises(YamlDecodeError):
        parse_duration(text)


def test_full_document():
    tf = Taskfile.from_node(parse(DOCUMENT))
    assert tf.version == Version("3")
    assert tf.output.name == "prefixed"
    assert tf.method == "checksum"
    assert tf.posix_opts == ["pipefail"]
    assert tf.bash_opts == ["globstar"]
    assert tf.silent is True
    assert tf.dotenv == [".env"]
    assert tf.run == "once"
    assert tf.interval == timedelta(milliseconds=500)
    assert tf.includes.keys() == ["docs", "lib"]
    assert tf.includes.get("lib").optional is True
    assert tf.vars.get("GREETING") == Var(static="hello")
    assert tf.env.get("MODE") == Var(static="dev")
    assert list(tf.tasks) == ["build", "test"]
    assert tf.tasks["test"].cmds[0].cmd == "go test"


def test_defaults_filled_in():
    tf = Taskfile.from_node(parse("version: '3'\n"))
    assert tf.expansions == 2
    assert tf.vars == Vars()
    assert tf.env == Vars()
    assert tf.includes is None
    assert tf.tasks == {}
    assert tf.interval == timedelta(0)


def test_non_positive_expansions_reset():
    assert Taskfile.from_node(parse("expansions: 0\n")).expansions == 2
    assert Taskfile.from_node(parse("expansions: 4\n")).expansions == 4


def test_rejects_scalar_document():
    with pytest.raises(YamlDecodeError, match="into taskfile"):
        Taskfile.from_node(parse("just text"))


def test_bad_interval_rejected():
    with pytest.raises(YamlDecodeError):
        Taskfile.from_node(parse("interval: soon\n"))