"""Running external commands with captured, tee-able output."""

from __future__ import annotations

import io
import shlex
import subprocess
import threading
from typing import IO, Any

__all__ = [
    "RunError",
    "LocalCmd",
    "LocalCmder",
    "DEFAULT_CMDER",
    "command",
    "command_with_timeout",
    "pretty_command",
]

_CHUNK = 64 * 1024


def pretty_command(name: str, *args: str) -> str:
    """Render a command line that could be pasted into a shell."""
    return " ".join(shlex.quote(part) for part in (name, *args))


class RunError(Exception):
    """A command failed to start, exited non-zero or timed out."""

    def __init__(
        self, command: list[str], output: bytes, inner: BaseException | None
    ) -> None:
        super().__init__(command, output, inner)
        self.command = list(command)
        self.output = output
        self.inner = inner

    def __str__(self) -> str:
        return f'command "{self.pretty_command()}" failed with error: {self.inner}'

    def pretty_command(self) -> str:
        """The failed command, quoted for a shell."""
        return pretty_command(self.command[0], *self.command[1:])

    @property
    def cause(self) -> BaseException:
        """The underlying error, or this error when there is none."""
        return self.inner if self.inner is not None else self


def _write(target: IO[Any], data: bytes) -> None:
    try:
        target.write(data)
    except TypeError:
        target.write(data.decode(errors="replace"))
    flush = getattr(target, "flush", None)
    if flush is not None:
        flush()


def _pump(
    source: IO[bytes], target: IO[Any] | None, combined: io.BytesIO, lock: threading.Lock
) -> None:
    for chunk in iter(lambda: source.read1(_CHUNK), b""):
        with lock:
            combined.write(chunk)
            if target is not None:
                _write(target, chunk)


def _feed(source: IO[Any], sink: IO[bytes]) -> None:
    try:
        for chunk in iter(lambda: source.read(_CHUNK), None):
            if not chunk:
                break
            if isinstance(chunk, str):
                chunk = chunk.encode()
            sink.write(chunk)
            sink.flush()
    except (BrokenPipeError, ValueError):
        pass
    finally:
        try:
            sink.close()
        except OSError:
            pass


def _has_fileno(stream: IO[Any]) -> bool:
    try:
        stream.fileno()
    except (AttributeError, OSError, ValueError):
        return False
    return True


class LocalCmd:
    """A command run as a local subprocess."""

    def __init__(self, name: str, *args: str, timeout: float | None = None) -> None:
        self.args = [name, *args]
        self.timeout = timeout
        self._env: dict[str, str] | None = None
        self._stdin: IO[Any] | None = None
        self._stdout: IO[Any] | None = None
        self._stderr: IO[Any] | None = None

    def set_env(self, *args: str) -> LocalCmd:
        """Replace the environment with ``KEY=value`` entries; none inherits."""
        if not args:
            self._env = None
        else:
            env: dict[str, str] = {}
            for entry in args:
                key, _, value = entry.partition("=")
                env[key] = value
            self._env = env
        return self

    def set_stdin(self, stream: IO[Any] | None) -> LocalCmd:
        self._stdin = stream
        return self

    def set_stdout(self, stream: IO[Any] | None) -> LocalCmd:
        self._stdout = stream
        return self

    def set_stderr(self, stream: IO[Any] | None) -> LocalCmd:
        self._stderr = stream
        return self

    def run(self) -> None:
        """Run the command to completion, raising :class:`RunError` on failure.

        Output goes to the configured streams and is also collected, stdout
        and stderr interleaved, into the error's ``output``.
        """
        combined = io.BytesIO()
        lock = threading.Lock()
        feed_from: IO[Any] | None = None
        if self._stdin is None:
            stdin_arg: Any = subprocess.DEVNULL
        elif _has_fileno(self._stdin):
            stdin_arg = self._stdin
        else:
            stdin_arg = subprocess.PIPE
            feed_from = self._stdin

        try:
            proc = subprocess.Popen(
                self.args,
                stdin=stdin_arg,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                env=self._env,
            )
        except OSError as exc:
            raise RunError(self.args, b"", exc) from exc

        workers = [
            threading.Thread(
                target=_pump, args=(proc.stdout, self._stdout, combined, lock), daemon=True
            ),
            threading.Thread(
                target=_pump, args=(proc.stderr, self._stderr, combined, lock), daemon=True
            ),
        ]
        if feed_from is not None:
            workers.append(
                threading.Thread(target=_feed, args=(feed_from, proc.stdin), daemon=True)
            )
        for worker in workers:
            worker.start()

        failure: BaseException | None = None
        try:
            proc.wait(timeout=self.timeout)
        except subprocess.TimeoutExpired as exc:
            proc.kill()
            proc.wait()
            failure = exc
        else:
            if proc.returncode != 0:
                failure = subprocess.CalledProcessError(proc.returncode, self.args)

        for worker in workers:
            worker.join()
        for pipe in (proc.stdout, proc.stderr):
            if pipe is not None:
                pipe.close()

        if failure is not None:
            raise RunError(self.args, combined.getvalue(), failure) from failure


class LocalCmder:
    """Factory for :class:`LocalCmd`."""

    def command(self, name: str, *args: str) -> LocalCmd:
        return LocalCmd(name, *args)

    def command_with_timeout(self, timeout: float, name: str, *args: str) -> LocalCmd:
        """Like :meth:`command`, but the process is killed after ``timeout`` seconds."""
        return LocalCmd(name, *args, timeout=timeout)


DEFAULT_CMDER = LocalCmder()


def command(name: str, *args: str) -> LocalCmd:
    """Create a command with the default factory."""
    return DEFAULT_CMDER.command(name, *args)


def command_with_timeout(timeout: float, name: str, *args: str) -> LocalCmd:
    """Create a time-limited command with the default factory."""
    return DEFAULT_CMDER.command_with_timeout(timeout, name, *args)