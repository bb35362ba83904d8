"""Command file watch loop backed by watchdog notifications."""
from __future__ import annotations

import logging
import os
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union, cast

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.polling import PollingObserver

from .actions import CommandDispatcher
from .commands import Command
from .config import WatchBackend, WatcherConfig
from .events import EventType, FileEvent

logger = logging.getLogger(__name__)

_STOP = object()

_EVENT_TYPES = {
    "created": EventType.CREATED,
    "modified": EventType.MODIFIED,
    "deleted": EventType.DELETED,
    "moved": EventType.MOVED,
}


@dataclass
class MonitorStats:
    """Counters reported when the monitor stops."""

    events_seen: int = 0
    commands_read: int = 0


class _CommandFileHandler(FileSystemEventHandler):
    """Forwards notifications about one file from the observer thread to a queue."""

    def __init__(self, target: Path, events: "queue.Queue[object]"):
        super().__init__()
        self._target = target
        self._events = events

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        event_type = _EVENT_TYPES.get(event.event_type)
        if event_type is None:
            return

        src_path = Path(os.fsdecode(event.src_path))
        dest_raw = getattr(event, "dest_path", "")
        dest_path = Path(os.fsdecode(dest_raw)) if dest_raw else None

        if src_path == self._target:
            self._events.put(FileEvent(event_type=event_type, path=src_path))
        elif dest_path == self._target:
            self._events.put(FileEvent(event_type=event_type, path=dest_path, previous_path=src_path))


class CommandFileWatcher:
    """Blocking iterator over change notifications for a single file.

    The file's parent directory is observed (non-recursively) and only events
    naming the file itself are yielded. Iteration waits without a timeout and
    ends once :meth:`close` has been called.
    """

    def __init__(self, path: Path, *, backend: WatchBackend = WatchBackend.NATIVE, poll_interval: float = 1.0):
        self._path = path.resolve()
        self._events: "queue.Queue[object]" = queue.Queue()
        if backend is WatchBackend.POLLING:
            self._observer = PollingObserver(timeout=poll_interval)
        else:
            self._observer = Observer()
        self._observer.schedule(
            _CommandFileHandler(self._path, self._events),
            str(self._path.parent),
            recursive=False,
        )
        self._lock = threading.Lock()
        self._started = False
        self._closed = False

    @property
    def path(self) -> Path:
        return self._path

    def start(self) -> None:
        """Start the observer unless the watcher is already running or closed."""

        with self._lock:
            if self._started or self._closed:
                return
            logger.debug("Subscribing to changes in %s", self._path.parent)
            self._observer.start()
            self._started = True

    def close(self) -> None:
        """Stop the observer and end any iteration in progress."""

        with self._lock:
            if self._closed:
                return
            self._closed = True
            started = self._started
        self._events.put(_STOP)
        if started:
            self._observer.stop()
            self._observer.join()

    def __enter__(self) -> "CommandFileWatcher":
        self.start()
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __iter__(self) -> Iterator[FileEvent]:
        while True:
            item = self._events.get()
            if item is _STOP:
                return
            yield cast(FileEvent, item)


class CommandFileMonitor:
    """Re-reads the command file on every modification and dispatches it."""

    def __init__(
        self,
        config: WatcherConfig,
        dispatcher: CommandDispatcher,
        *,
        events: Optional[Iterable[FileEvent]] = None,
    ):
        self._config = config
        self._dispatcher = dispatcher
        self._events = events
        self._watcher: Optional[CommandFileWatcher] = None
        self._stop_event = threading.Event()
        self._stats = MonitorStats()

    @property
    def stats(self) -> MonitorStats:
        return self._stats

    def run(self) -> None:
        """Run the watch loop until stopped.

        Raises ``OSError`` straight away if the command file cannot be opened.
        """

        path = self._config.command_file
        with path.open("rb"):
            pass

        logger.info("Watching command file %s", path)
        try:
            if self._events is not None:
                self._consume(self._events)
            else:
                watcher = CommandFileWatcher(
                    path,
                    backend=self._config.backend,
                    poll_interval=self._config.poll_interval,
                )
                self._watcher = watcher
                with watcher:
                    if self._stop_event.is_set():
                        watcher.close()
                    self._consume(watcher)
        except KeyboardInterrupt:
            logger.info("Monitor interrupted by user")
        finally:
            logger.info(
                "Monitor stopped after %s events, %s command reads",
                self._stats.events_seen,
                self._stats.commands_read,
            )

    def stop(self) -> None:
        """Signal the monitor to stop once the current command finishes."""

        self._stop_event.set()
        if self._watcher is not None:
            self._watcher.close()

    def handle_change(self) -> Optional[Command]:
        """Read the whole command file and dispatch its contents."""

        path = self._config.command_file
        logger.info("Command file %s has been changed", path)
        try:
            text = read_command_file(path, encoding=self._config.encoding)
        except OSError as exc:
            logger.error("Could not read command file %s: %s", path, exc)
            return None
        self._stats.commands_read += 1
        return self._dispatcher.dispatch(text)

    def _consume(self, events: Iterable[FileEvent]) -> None:
        for event in events:
            self._stats.events_seen += 1
            if event.event_type is not EventType.MODIFIED:
                logger.debug("Ignoring %s event for %s", event.event_type.value, event.path)
                continue
            self.handle_change()


def read_command_file(path: Union[str, Path], *, encoding: str = "utf-8") -> str:
    """Read exactly as many bytes as the file's current size and decode them."""

    size = os.stat(path).st_size
    with open(path, "rb") as handle:
        data = handle.read(size)
    return data.decode(encoding, errors="replace")
