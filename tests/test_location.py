from taskdef.location import Call, Location
from taskdef.variables import Var, Vars


def test_location_deep_copy_is_equal_and_independent():
    original = Location(line=3, column=5, taskfile="Taskfile.yml")
    copy = original.deep_copy()
    assert copy == original
    copy.line = 10
    assert original.line == 3


def test_location_defaults():
    assert Location() == Location(line=0, column=0, taskfile="")


def test_call_without_vars():
    call = Call(task="build")
    assert call.task == "build"
    assert call.vars is None


def test_call_with_vars():
    vars_ = Vars({"X": Var(static="1")})
    call = Call(task="build", vars=vars_)
    assert call.vars.get("X") == Var(static="1")