# filefarm

filefarm processes binary `.dat` files in parallel and collects the results
in sorted order.

Each `.dat` file is a sequence of signed 64-bit integers in native byte order.
A worker computes the file's weighted sum: the first value times 1, the second
times 2, and so on. Trailing bytes that do not make a whole value are ignored,
and the sum wraps like a signed 64-bit integer. The worker then sends the
file's path and its sum to a collector over the Unix socket `./farm.sck`.

The collector accepts one record per connection. It stops once no
connection or data arrives for the timeout, which is 3 seconds by default.
It then removes the socket file and prints every result, ordered by value.
Equal values stay in the order they arrived:

```
Ordered List:
Value: 42, Path: ./data/a.dat
Value: 97, Path: ./data/sub/b.dat
```

## Installation

```
pip install .
```

## Usage

To run the whole farm, use `filefarm`. It starts the master/worker and the
collector as two processes. It waits for both to finish and exits with the
collector's status:

```
filefarm -n 4 -q 8 -d ./data extra1.dat extra2.dat
```

You can also start the two parts separately. Start the collector first:

```
filefarm-collector
```

Then, from the same directory, start the master:

```
filefarm-master -n 4 -q 8 -t 0 -d ./data file1.dat
```

The master waits one second before it submits any work. This gives the
collector time to start listening.

### Master options

- `-n N`: number of worker threads (default 4, must be at least 1)
- `-q Q`: length of the pending-task queue (default 8, must be at least 1)
- `-d DIR`: directory to search recursively for `.dat` files. Entries are
  visited in name order, and symbolic links are not followed.
- `-t MS`: delay in milliseconds after each submitted task (default 0, must
  not be negative)

Options and file names may be mixed in any order. Any other argument whose
name ends in `.dat` is processed as a file, provided something comes before
the `.dat`. An invalid option or value prints an error and exits with
status 1, as does running with no arguments at all.

### Collector options

- `--socket PATH`: Unix socket path to listen on (default `./farm.sck`)
- `--timeout SECONDS`: seconds of inactivity before stopping (default 3)

## Library use

`filefarm.threadpool.ThreadPool(numthreads, pending_size)` is a fixed-size
thread pool with a bounded queue of pending tasks:

```python
from filefarm.threadpool import ThreadPool

with ThreadPool(4, 8) as pool:
    pool.submit(print, "hello")
```

The pool behaves as follows:

- `submit(fn, *args)` blocks while the queue is full.
- If `pending_size` is 0, the pool keeps no pending tasks. Submitting while
  every worker is busy raises `QueueFullError`.
- Submitting to a pool that is shutting down raises `PoolClosedError`.
- When the `with` block ends, the pool runs all pending tasks and then shuts
  down.
- `pool.shutdown(True)` lets the workers finish their current task and then
  stop, dropping what is still queued.
- An exception raised by a task is logged and does not stop its worker.

`filefarm.threadpool.spawn_thread(fn, *args)` runs a callable on its own
daemon thread, outside any pool. It returns the thread.

`filefarm.util` holds the wire format and the I/O helpers:

- `encode_record(path, value)` and `decode_record(data)` handle the record
  format: a 255-byte NUL-padded path followed by a 64-bit value.
- `read_exact(sock, size)` and `write_all(sock, data)` read and write a whole
  buffer on a socket.
- `parse_number(text)` parses an integer in the signed 64-bit range.

`filefarm.master_worker` exposes the worker steps: `weighted_sum`,
`find_dat_files`, `send_result` and `process_file`. The collector's sorted
container is `filefarm.collector.OrderedList`.

## Limitations

- The master always sends to `./farm.sck` in the current directory and has no
  option to change it. A collector started with a different `--socket`
  receives nothing from it.
- Results are printed only once the collector stops. Nothing is written to
  disk.
- A path of 255 bytes or more cannot be encoded. The task for such a file
  fails and is logged, and its result is never sent.