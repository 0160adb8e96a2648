import platform
import sys

import pytest

from taskdef.location import Call
from taskdef.lookup import (
    MultipleTasksWithAliasError,
    TaskNotFoundError,
    current_platform,
    filter_out_internal,
    filter_out_no_desc,
    get_task,
    list_tasks,
    should_ignore_file,
    should_run_on_current_platform,
)
from taskdef.platforms import Platform
from taskdef.task import Task
from taskdef.taskfile import Taskfile


def _taskfile(*tasks):
    return Taskfile(tasks={task.task: task for task in tasks})


def test_get_task_by_name():
    build = Task(task="build")
    assert get_task(_taskfile(build, Task(task="test")), Call(task="build")) is build


def test_get_task_by_alias():
    greet = Task(task="greet", aliases=["g", "hi"])
    assert get_task(_taskfile(greet, Task(task="other")), Call(task="hi")) is greet


def test_get_task_name_wins_over_alias():
    f_task = Task(task="f")
    taskfile = _taskfile(Task(task="foo", aliases=["f"]), f_task)
    assert get_task(taskfile, Call(task="f")) is f_task


def test_get_task_duplicate_alias():
    taskfile = _taskfile(Task(task="a", aliases=["x"]), Task(task="b", aliases=["x"]))
    with pytest.raises(MultipleTasksWithAliasError) as info:
        get_task(taskfile, Call(task="x"))
    assert info.value.alias_name == "x"
    assert sorted(info.value.task_names) == ["a", "b"]


def test_get_task_not_found_suggests():
    taskfile = _taskfile(Task(task="build"), Task(task="deploy"))
    with pytest.raises(TaskNotFoundError) as info:
        get_task(taskfile, Call(task="buidl"))
    assert info.value.task_name == "buidl"
    assert info.value.did_you_mean == "build"


def test_get_task_not_found_without_suggestion():
    with pytest.raises(TaskNotFoundError) as info:
        get_task(_taskfile(Task(task="build")), Call(task="zzzzzz"))
    assert info.value.did_you_mean == ""


def test_list_tasks_orders_top_level_first():
    taskfile = _taskfile(
        Task(task="b"), Task(task="ns:a"), Task(task="a"), Task(task="c")
    )
    assert [t.task for t in list_tasks(taskfile)] == ["a", "b", "c", "ns:a"]


def test_list_tasks_filters():
    taskfile = _taskfile(
        Task(task="foo", desc="has one"),
        Task(task="voo"),
        Task(task="doo", desc="hidden", internal=True),
    )
    assert [t.task for t in list_tasks(taskfile, filter_out_no_desc)] == ["doo", "foo"]
    assert [
        t.task for t in list_tasks(taskfile, filter_out_no_desc, filter_out_internal)
    ] == ["foo"]
    assert len(list_tasks(taskfile)) == 3


def test_filters_directly():
    assert filter_out_no_desc(Task(task="x")) is True
    assert filter_out_no_desc(Task(task="x", desc="d")) is False
    assert filter_out_internal(Task(task="x", internal=True)) is True


@pytest.mark.parametrize(
    "sys_platform, machine, expected",
    [
        ("linux", "x86_64", ("linux", "amd64")),
        ("win32", "AMD64", ("windows", "amd64")),
        ("darwin", "arm64", ("darwin", "arm64")),
        ("linux", "i686", ("linux", "386")),
    ],
)
def test_current_platform(monkeypatch, sys_platform, machine, expected):
    monkeypatch.setattr(sys, "platform", sys_platform)
    monkeypatch.setattr(platform, "machine", lambda: machine)
    assert current_platform() == expected


def test_should_run_on_current_platform(monkeypatch):
    monkeypatch.setattr(sys, "platform", "linux")
    monkeypatch.setattr(platform, "machine", lambda: "x86_64")
    assert should_run_on_current_platform(None) is True
    assert should_run_on_current_platform([]) is True
    assert should_run_on_current_platform([Platform(os="linux")]) is True
    assert should_run_on_current_platform([Platform(os="windows")]) is False
    assert should_run_on_current_platform([Platform(arch="arm64")]) is False
    assert (
        should_run_on_current_platform(
            [Platform(os="windows"), Platform(os="linux", arch="amd64")]
        )
        is True
    )


@pytest.mark.parametrize(
    "path, ignored",
    [
        ("/repo/.git/HEAD", True),
        ("/repo/.hg/store", True),
        ("/repo/.task/checksum/build", True),
        ("/repo/node_modules/pkg/index.js", True),
        ("/repo/src/main.go", False),
    ],
)
def test_should_ignore_file(path, ignored):
    assert should_ignore_file(path) is ignored