# taskdef

`taskdef` reads Taskfile definitions (`Taskfile.yml` and the like) into plain Python
objects. It can also:

- resolve and merge included Taskfiles;
- look up tasks by name or alias;
- list tasks in display order.

## Installation

```
pip install taskdef
```

## Reading a Taskfile

`read_taskfile` takes a `ReaderNode` and returns a `(Taskfile, directory)` pair.
It first looks for a Taskfile in the node's directory, which defaults to the
current one. If none is there, it walks up through the parent directories. The
walk stops at the filesystem root, or at the first parent directory that has a
different owner.

```python
from taskdef.reader import ReaderNode, read_taskfile

taskfile, directory = read_taskfile(ReaderNode(dir="path/to/project"))

print(taskfile.version)
for name, task in sorted(taskfile.tasks.items()):
    print(name, task.desc)
```

When no entrypoint is given, these file names are tried in order:

1. `Taskfile.yml`
2. `Taskfile.yaml`
3. `Taskfile.dist.yml`
4. `Taskfile.dist.yaml`

Every `includes:` entry is read and merged in under its namespace. For includes:

- A path is resolved relative to the directory of the Taskfile that includes it.
- `$VAR`, `${VAR}` and `~` are expanded in the path.
- A cycle of includes raises `TaskfileReadError`.
- A missing include raises an error, unless the include is marked `optional: true`.
- From version 3 on, an included Taskfile may not declare `dotenv`.
- Mapping-form includes also accept these options:
  - `dir`: sets the working directory of the included tasks and variables.
  - `vars`: passes variables to the included tasks.
  - `internal`: marks the included tasks internal.
  - `aliases`: adds alias namespaces.
- If the included Taskfile has a `default` task, that task can also be called by
  the namespace name itself. This happens only when no task of that name exists.

For Taskfiles older than version 3, a `Taskfile_<os>.yml` next to the main file is
merged in as well.

Other functions in `taskdef.reader`:

- `read_taskfile_file(path)` parses one file without following includes.
- `find_taskfile(path)` and `find_taskfile_walk(path)` locate a Taskfile.
- `read_taskvars(directory)` loads `Taskvars.yml` and `Taskvars_<os>.yml` into a `Vars`.

## Looking up tasks

```python
from taskdef.location import Call
from taskdef.lookup import get_task, list_tasks, filter_out_internal, filter_out_no_desc

task = get_task(taskfile, Call(task="build"))
print(task.name(), [cmd.cmd for cmd in task.cmds or () if cmd is not None])

for task in list_tasks(taskfile, filter_out_no_desc, filter_out_internal):
    print(f"* {task.task}: {task.desc}")
```

How `get_task` finds a task:

- An exact task name wins.
- Otherwise the name is matched against task aliases.
- If nothing matches, it raises `TaskNotFoundError`, which may carry a close-match
  suggestion.
- If more than one task shares the alias, it raises `MultipleTasksWithAliasError`.

`list_tasks` drops every task that any of the given filters rejects. It lists tasks
without a namespace first, then namespaced ones, each group sorted by name.

Platform and path helpers:

- `current_platform()` returns the running OS and architecture names, such as
  `("linux", "amd64")`.
- `should_run_on_current_platform(platforms)` checks a task's or command's platform
  list against that pair.
- `should_ignore_file(path)` tells whether a path lies under `.git`, `.hg`, `.task`
  or `node_modules`.

## Parsing pieces directly

Each building block can be decoded on its own from a YAML node:

```python
from taskdef.yamlnodes import parse
from taskdef.commands import Cmd
from taskdef.precondition import Precondition
from taskdef.platforms import Platform

cmd = Cmd.from_node(parse("defer: echo 'done'"))
assert cmd.defer and cmd.cmd == "echo 'done'"

pre = Precondition.from_node(parse("test -f foo.txt"))
assert pre.msg == "`test -f foo.txt` failed"

platform = Platform.parse("windows/amd64")
assert (platform.os, platform.arch) == ("windows", "amd64")
```

Variables and merging:

- `Vars` keeps variables in declaration order.
- `Vars.merge` overrides existing values in place and appends new keys at the end.
- `taskdef.merge.merge` combines two `Taskfile` objects of the same version and
  prefixes the merged task names with namespaces. Dependencies, task calls and
  aliases get the same prefix.
- A name that starts with `:` refers to the root namespace.

Parsing helpers in `taskdef.taskfile`:

- `parse_version("3")` reads the `version:` field.
- `parse_duration("500ms")` reads the `interval:` field.

Decoding problems raise `YamlDecodeError`. An invalid platform string raises
`InvalidPlatformError`. Mismatched versions raise `MergeError`.

## What this package does not do

`taskdef` only reads and queries Taskfile definitions. It does not:

- run commands or tasks;
- check preconditions or whether a task is up to date;
- evaluate templates or `sh:` variables;
- load dotenv files;
- watch files for changes.

It also has no command-line interface.