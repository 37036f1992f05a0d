"""Process and environment collaborators queried on each health request.

Both are protocols so tests (and unusual hosts) can supply fakes. The default
implementations read the current process through ``psutil`` and
``os.environ``.
"""

from __future__ import annotations

import os
import platform
import sys
import time
from collections.abc import Mapping
from typing import Protocol

import psutil


class RuntimeInfoProvider(Protocol):
    def uptime(self) -> float: ...

    def pid(self) -> int: ...

    def memory_usage(self) -> dict[str, int]: ...

    def cpu_usage(self) -> dict[str, int]: ...

    def version(self) -> str: ...

    def platform(self) -> str: ...

    def architecture(self) -> str: ...


class EnvironmentReader(Protocol):
    def get(self, key: str) -> str | None: ...


class ProcessRuntimeInfo:
    """``RuntimeInfoProvider`` for the running interpreter.

    Memory fields keep the keys health consumers already parse:
    ``rss`` is the resident set size, ``heapTotal`` the virtual memory size,
    ``heapUsed`` the data segment (falls back to rss where the platform does
    not report one) and ``external`` shared memory (0 where unavailable).
    CPU times are reported in microseconds.
    """

    def __init__(self, process: psutil.Process | None = None) -> None:
        self._process = process or psutil.Process(os.getpid())

    def uptime(self) -> float:
        return max(time.time() - self._process.create_time(), 0.0)

    def pid(self) -> int:
        return self._process.pid

    def memory_usage(self) -> dict[str, int]:
        mem = self._process.memory_info()
        return {
            "rss": mem.rss,
            "heapTotal": mem.vms,
            "heapUsed": getattr(mem, "data", mem.rss),
            "external": getattr(mem, "shared", 0),
        }

    def cpu_usage(self) -> dict[str, int]:
        times = self._process.cpu_times()
        return {
            "user": int(times.user * 1_000_000),
            "system": int(times.system * 1_000_000),
        }

    def version(self) -> str:
        return platform.python_version()

    def platform(self) -> str:
        return sys.platform

    def architecture(self) -> str:
        return platform.machine()


class OsEnvironment:
    """Reads ``os.environ`` at call time."""

    def get(self, key: str) -> str | None:
        return os.environ.get(key)


class MappingEnvironment:
    """``EnvironmentReader`` over a fixed mapping."""

    def __init__(self, values: Mapping[str, str]) -> None:
        self._values = dict(values)

    def get(self, key: str) -> str | None:
        return self._values.get(key)
