import pytest

from taskdef.variables import Var, Vars
from taskdef.yamlnodes import YamlDecodeError, parse


def test_var_from_scalar():
    assert Var.from_node(parse("hello")) == Var(static="hello")


def test_var_from_sh_mapping():
    assert Var.from_node(parse("sh: echo hi")) == Var(sh="echo hi")


def test_var_from_sequence_fails():
    with pytest.raises(YamlDecodeError, match="into variable"):
        Var.from_node(parse("[1, 2]"))


def test_vars_from_node_keeps_order():
    vars_ = Vars.from_node(parse("B: two\nA: one\n"))
    assert vars_.keys() == ["B", "A"]
    assert vars_.get("A") == Var(static="one")


def test_vars_from_scalar_fails():
    with pytest.raises(YamlDecodeError, match="into variables"):
        Vars.from_node(parse("just-text"))


def test_set_existing_key_keeps_position():
    vars_ = Vars({"X": Var(static="1"), "Y": Var(static="2")})
    vars_.set("X", Var(static="3"))
    assert vars_.keys() == ["X", "Y"]
    assert vars_.get("X") == Var(static="3")


def test_merge_overrides_and_appends():
    base = Vars({"X": Var(static="1")})
    base.merge(Vars({"Y": Var(static="2"), "X": Var(static="9")}))
    assert base.items() == [("X", Var(static="9")), ("Y", Var(static="2"))]


def test_merge_none_is_noop():
    base = Vars({"X": Var(static="1")})
    base.merge(None)
    assert base == Vars({"X": Var(static="1")})


def test_to_cache_map_skips_sh_and_prefers_live():
    vars_ = Vars(
        {
            "S": Var(static="s"),
            "D": Var(sh="echo d"),
            "L": Var(static="ignored", live=[1, 2]),
        }
    )
    assert vars_.to_cache_map() == {"S": "s", "L": [1, 2]}


def test_deep_copy_is_independent():
    original = Vars({"X": Var(static="1")})
    copy = original.deep_copy()
    copy.set("Y", Var(static="2"))
    assert copy == Vars({"X": Var(static="1"), "Y": Var(static="2")})
    assert len(original) == 1


def test_len_contains_and_missing_get():
    vars_ = Vars({"X": Var(static="1")})
    assert len(vars_) == 1
    assert "X" in vars_
    assert "Z" not in vars_
    assert vars_.get("Z") is None


def test_equality_depends_on_order():
    first = Vars({"A": Var(), "B": Var()})
    second = Vars({"B": Var(), "A": Var()})
    assert not first == second