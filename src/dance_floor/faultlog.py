"""faulthandler wiring so crashes leave a stack dump beside the app log."""

from __future__ import annotations

import faulthandler
import threading
import time
from pathlib import Path
from typing import Optional, TextIO

CRASHDUMP_NAME = "crashdump.log"

_DUMP_FILE: Optional[TextIO] = None
_LOCK = threading.Lock()


def enable_faulthandler(log_path: Path) -> Path:
    """Enable faulthandler and return the crash dump path."""
    dump_path = log_path.parent / CRASHDUMP_NAME
    try:
        dump_path.parent.mkdir(parents=True, exist_ok=True)
        handle = open(dump_path, "a", encoding="utf-8")
    except OSError:
        return dump_path
    global _DUMP_FILE
    with _LOCK:
        previous, _DUMP_FILE = _DUMP_FILE, handle
    if previous is not None:
        previous.close()
    faulthandler.enable(file=handle, all_threads=True)
    return dump_path


def dump_threads(label: str) -> None:
    """Write a stamped header and the stacks of every thread."""
    handle = _DUMP_FILE
    if handle is None:
        return
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", time.localtime())
    try:
        handle.write(f"\n[{stamp}] {label}\n")
        handle.flush()
        faulthandler.dump_traceback(file=handle, all_threads=True)
        handle.flush()
    except (OSError, ValueError):
        # Handle closed underneath us (interpreter shutdown).
        pass


def disable_faulthandler() -> None:
    global _DUMP_FILE
    faulthandler.disable()
    with _LOCK:
        handle, _DUMP_FILE = _DUMP_FILE, None
    if handle is not None:
        handle.close()
