import pytest

from taskdef.output import Output, OutputGroup
from taskdef.yamlnodes import YamlDecodeError, parse


def test_scalar_is_style_name():
    output = Output.from_node(parse("prefixed"))
    assert output.name == "prefixed"
    assert output.is_set()
    assert not output.group.is_set()


def test_null_is_unset():
    assert not Output.from_node(parse("~")).is_set()


def test_group_mapping():
    output = Output.from_node(
        parse("group:\n  begin: start\n  end: stop\n  error_only: true\n")
    )
    assert output == Output(
        name="group", group=OutputGroup(begin="start", end="stop", error_only=True)
    )
    assert output.group.is_set()


def test_mapping_without_group_fails():
    with pytest.raises(YamlDecodeError) as info:
        Output.from_node(parse("other: x"))
    assert str(info.value) == (
        'task: output style must have the "group" key when in mapping form'
    )


def test_invalid_group_fails():
    with pytest.raises(YamlDecodeError, match='mapping with a "group" key'):
        Output.from_node(parse("group: [1, 2]"))


def test_sequence_fails():
    with pytest.raises(YamlDecodeError, match="into output"):
        Output.from_node(parse("[a]"))


def test_output_group_is_set():
    assert not OutputGroup().is_set()
    assert OutputGroup(end="done").is_set()
    assert not OutputGroup(error_only=True).is_set()