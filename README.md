# muxd

Tools for a terminal multiplexer daemon that speaks JSON-RPC 2.0 over
WebSocket: the protocol's message types, pane classification, PID-file based
daemon management, a small client, and a command that runs a status server.

## Modules

- `muxd.rpc` – JSON-RPC envelopes: `Request`, `Response` (with `is_error()`),
  `Notification`, `RpcError`, and `parse_message(data)`, which accepts a dict
  or JSON text and tries request, response and notification in turn.
- `muxd.requests`, `muxd.responses` – dataclasses for method parameters and
  results (sessions, panes, search, layout, state save/restore). Each has
  `to_dict()` and `from_dict()`. `parse_layout()` decodes a layout tree of
  `PaneLayout` and `SplitLayout` nodes.
- `muxd.notifications` – pane output, pane exit, session change, pane resize
  and error notifications, with `notification_method()`,
  `notification_to_dict()` and `notification_from_dict()` for their tagged
  JSON form.
- `muxd.types` – `PaneSize` (24×80 by default), `PaneType`,
  `parse_pane_type()`, `AuthToken`, `MuxdConfig`, and `new_session_id()` /
  `new_pane_id()` (`sess_…` / `pane_…` followed by a random hex UUID).
- `muxd.errors` – the `MuxdError` hierarchy (`SessionNotFound`,
  `PaneNotFound`, `ResourceLimit`, `InvalidState`, `MuxdConnectionError`,
  `MuxdIOError`, `JsonError` and others). `error.error_code()` gives the
  JSON-RPC code sent to clients; `error_code_for(error)` gives the `ErrorCode`
  classification.
- `muxd.classification` – `PaneCategory`, `PaneMetadata` (tags, attributes,
  priority, timestamps), `TerminalPane` / `CustomPane`, and
  `PaneClassificationQuery` for filtering panes.
- `muxd.daemon` – `Daemon(data_dir)` manages `muxd.pid` in the data
  directory: `write_pid()`, `pid()`, `is_running()` (removes a stale PID
  file), `remove_pid_file()`, `daemonize()` and `stop()`. Used as a context
  manager, it removes the PID file on exit if the file names the current
  process.
- `muxd.client` – `MuxdClient.connect(port)` opens `ws://127.0.0.1:<port>/ws`;
  `request()`, `get_status()`, `shutdown()`, `close()`. The helpers
  `check_daemon_status(port)` (returns `{"running": False, "port": port}` when
  nothing answers) and `stop_daemon(port)`.
- `muxd.planner` – `plan_workers(task)` picks `WorkerPlan` entries (API,
  auth, frontend, database, plus a tester; or a single general worker) from
  keywords in the task text. `OrchestrationCommand` holds a task and a
  timestamp.

## Installation

```
pip install .
```

## Command line

```
muxd                     # run the server in the foreground
muxd start --foreground  # write the PID file, then run the server
muxd start               # detach from the terminal, write the PID file, run the server
muxd status              # report whether the daemon answers, with PID, version and counts
muxd stop                # stop the daemon
```

Options, given before the command: `-p/--port` (default 7890),
`-l/--log-level` (`trace`, `debug`, `info`, `warn`, `error`; default `info`)
and `-d/--data-dir` (default `~/.muxd`, where `muxd.pid` is kept).

`muxd start` refuses to run when the PID file names a live process. Without
`--foreground` it starts a new session, ignores SIGHUP and redirects the
standard streams to `/dev/null`; it does not fork, so launch it in the
background from the shell or from a service manager.

`muxd stop` sends SIGTERM to the recorded process, then SIGKILL if it is still
alive half a second later, and removes the PID file. If that is not possible
it asks the server to shut down over WebSocket.

The server listens on `0.0.0.0` at the chosen port. `/` and `/health` answer
with plain text; `/ws` takes JSON-RPC messages and handles `server_status`
and `server_shutdown`. Any other method gets error `-32601` ("Method not
found"); malformed JSON gets `-32700`.

## What the package does not do

The server that `muxd` runs holds no sessions or panes: it does not create
sessions, start terminal programs, keep pane output, search it, resize panes
or save and restore state, and `server_status` always reports 0 sessions and
0 panes. The request and response types for those methods describe the
messages only. Likewise `plan_workers` only produces a plan; nothing here
spawns the workers.

## Library use

```python
from muxd.client import check_daemon_status
from muxd.daemon import Daemon
from muxd.planner import plan_workers

status = check_daemon_status(7890)
print(status.get("running"))

with Daemon("/tmp/muxd-data") as daemon:
    daemon.write_pid()
    print(daemon.pid())

for worker in plan_workers("Build a REST API with user auth"):
    print(worker.name, worker.worker_type, worker.task)
```

Filtering panes by classification:

```python
from muxd.classification import (
    CustomPane, PaneCategory, PaneClassificationQuery, PaneMetadata,
)

metadata = PaneMetadata()
metadata.add_tag("cargo")
pane = CustomPane(name="build-server", category=PaneCategory.BUILD, metadata=metadata)

query = PaneClassificationQuery().with_category(PaneCategory.BUILD).with_tag("cargo")
assert query.matches(pane)
```

## Running the tests

```
pip install .[test]
pytest
```