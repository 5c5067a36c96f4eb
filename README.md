# kindcli

Building blocks for a tool that manages local Kubernetes clusters whose
nodes run as Docker containers, together with a small command line.

## Installation

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Command line

The `kindcli` command (its help calls itself `kind`) has one subcommand:

```
kindcli --help
kindcli version
kindcli -q version
```

- `kindcli version` prints `kind v<version> python<x.y.z> <system>/<machine>`.
  With `-q` / `--quiet`, or a negative verbosity, it prints only the
  semantic version, e.g. `0.23.0-alpha`.
- `kindcli --version` prints `kind version <version>`.
- `-v N` / `--verbosity N` sets the verbosity.
- `--loglevel` is deprecated. When `-v` is not given, `debug` maps to
  verbosity 3 and `trace` to 2147483647. Using it prints a warning on stderr
  unless `-q` is given.
- The global flags may be given before or after the subcommand.
- With no subcommand the help text is printed.

## Library

### `kindcli.errors`

- `wrap(err, message)` and `wrapf(err, fmt, *args)` return a `WrappedError`
  that holds the message, the cause (`.cause`) and the stack at the point of
  wrapping. A `None` error stays `None`.
- `new_aggregate(errlist)` drops `None` entries and flattens nested
  aggregates. It returns `None` when nothing is left, the single error when
  one is left, and an `AggregateError` otherwise.
- `AggregateError` keeps its errors in `.errors`. Its message lists the
  distinct messages in the form `[a, b]`. `matches(target)` tests whether any
  held error is, or is caused by, `target`, which may be an error instance or
  an exception class.
- `errors(err)` returns the errors of the deepest aggregate in a cause chain.
  It returns `[]` when there is none.
- `stack_trace(err)` returns the deepest recorded stack in a cause chain.

### `kindcli.concurrent`

- `until_error_concurrent(funcs)` runs each callable in its own thread and
  raises the first error to arrive. It does not wait for the remaining
  callables.
- `aggregate_concurrent(funcs)` waits for every callable. It raises a single
  failure as it is, and several failures as an `AggregateError`.

### `kindcli.command` and `kindcli.cmdhelpers`

- `command(name, *args)` and `command_with_timeout(timeout, name, *args)`
  create a `LocalCmd` through `DEFAULT_CMDER`, a `LocalCmder`.
- A `LocalCmd` has these chainable setters: `set_env("KEY=value", ...)`,
  `set_stdin`, `set_stdout` and `set_stderr`.
- `LocalCmd.run()` runs the process and sends its output to the configured
  streams. If the process cannot start, exits non-zero or times out, it
  raises `RunError`. The error carries `.command`, `.output` (stdout and
  stderr interleaved) and `.inner`.
- `pretty_command(name, *args)` quotes a command line so that it can be
  pasted into a shell.
- `output`, `output_lines` and `combined_output_lines` run a command and
  return what it printed.
- `inherit_output` sends a command's output to this process's stdout and
  stderr.
- `run_with_stdout_reader` and `run_with_stdin_writer` connect a command to
  a callable through a pipe.
- `run_error_for_error` finds the deepest `RunError` in a cause chain.

```python
from kindcli.command import command
from kindcli.cmdhelpers import output_lines

lines = output_lines(command("docker", "image", "ls", "-q"))
```

### `kindcli.fs`

- `temp_dir(dir, prefix)` creates a temporary directory. On macOS it returns
  the mountable `/private/var/...` form of the path.
- `is_abs(path)` treats a path as absolute if it is absolute by POSIX rules
  or by host rules.
- `copy(src, dst)` copies files, directory trees and symlink targets. It
  keeps modes and creates parent directories.
- `copy_file(src, dst)` copies a single file.

### `kindcli.images`

- `sanitize_image(ref)` fills in the default registry, the official
  repository and the `latest` tag where they are missing.
- `remove_duplicates(items)` keeps the first occurrence of each item.
- `check_if_image_retag_required(node, image_id, image_name, tag_fetcher)`
  returns `(exists, retag_required, sanitized_name)`.
- `image_id(name)` runs `docker image inspect` and returns the image ID.
- `save(images, dest)` runs `docker save` to write the images to an archive.

```python
from kindcli.images import sanitize_image, remove_duplicates

sanitize_image("ubuntu:18.04")        # 'docker.io/library/ubuntu:18.04'
remove_duplicates(["a", "b", "a"])    # ['a', 'b']
```

### `kindcli.version` and `kindcli.streams`

- `version()` returns the semantic version.
- `display_version()` returns the version with runtime and platform details
  added.
- `truncate(s, max_len)` shortens a string to at most `max_len` characters.
- `IOStreams` and `standard_io_streams()` bundle stdin, stdout and stderr.

## What this package does not do

The package does not create, delete or list clusters or nodes. It does not
export kubeconfig files or logs. It does not load images into nodes: the
image helpers only normalise references, query and save images on the host,
and decide whether a node's tags need updating. The command line offers only
`version`.