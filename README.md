# barutil

Utilities for building a desktop status bar on Linux: running shell
commands and reading their output, background worker threads that poll
or stream from a command, a JSON bar configuration loader with includes
and per-output selection, human-readable unit formatting, display-width
measurement, a thread-safe signal, an rfkill event reader, a sway/i3 IPC
client and a small state machine for a music-player module.

The package has no dependencies beyond the standard library.

## Installation

```
pip install .
```

For running the tests:

```
pip install ".[test]"
pytest
```

## Examples

Run a command and read its output:

```python
from barutil.command import exec_command

result = exec_command("echo hello")
print(result.exit_code, result.out)   # 0 hello
```

Load a bar configuration and pick the bars meant for one output:

```python
from barutil.config import Config

config = Config()
config.load("config.json")
for bar in config.get_output_configs("HDMI-0", "Fake HDMI output #0"):
    print(bar.get("layer"), bar.get("height"))
```

`Config.load("")` searches `Config.CONFIG_DIRS` for `config` or
`config.jsonc`. Files may pull in others through an `include` key; values
already present are kept. Errors are raised as `ConfigError`.

Format byte counts with SI or binary prefixes:

```python
from barutil.units import PowFormat, format_pow

print(format(PowFormat(1_500_000, "B"), ""))   # 1.5MB
print(format_pow(2048, "B", True, ""))          # 2KiB
```

Run a command on an interval in the background:

```python
from barutil.worker_thread import WorkerThread

worker = WorkerThread(
    {"exec": "date +%T", "interval": 5},
    output_callback=print,
    exit_callback=lambda code: print("failed with", code),
)
# ... later
worker.stop()
```

Without an `interval` the command runs continuously and each output line
is passed to `output_callback`; `restart-interval` restarts it after it ends.

Talk to sway over its IPC socket:

```python
from barutil.sway_ipc import Ipc, IpcCommand

ipc = Ipc(None)   # uses $SWAYSOCK
response = ipc.send_cmd(IpcCommand.GET_VERSION, "")
print(response.payload)
ipc.close()
```

## Modules

- `barutil.command` – start shell commands, read their output and reap background children
- `barutil.sleeper_thread` – a looping thread that can sleep and be woken
- `barutil.worker_thread` – poll or stream output from a configured command
- `barutil.jsonparse` – parse JSON with comments, treating empty input as an empty object
- `barutil.text` – whitespace trimming
- `barutil.config` – configuration search, loading, includes and output selection
- `barutil.units` – value formatting with k/M/G/T/P prefixes
- `barutil.width` – terminal column width of text
- `barutil.safe_signal` – deliver events from worker threads to the owner thread
- `barutil.rfkill` – parse rfkill events and track block state
- `barutil.sway_ipc` – sway/i3 IPC message encoding, swaybar config parsing and client
- `barutil.barmodel` – bar layers, margins and modes
- `barutil.mpd_state` – player connection state machine

## What it does not do

barutil is a library of parts. It does not draw a bar or any window,
has no command-line program, does not format dates or times, and does
not talk to a music player itself: `mpd_state.Context` drives a player
object that you supply.