"""
Input acquisition.

Argument shapes select the source:
- no arguments: stdin when piped and non-empty, else the clipboard
- `sel`: the primary selection (images stay binary)
- `file <path>`: the named file
- anything else: the arguments joined with spaces
"""

from __future__ import annotations

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path
from typing import BinaryIO

from faucet.core.errors import AcquisitionError
from faucet.core.payload import Payload

# Preferred image targets, most specific first
IMAGE_TARGETS = ("image/png", "image/jpeg", "image")


def xclip(*args: str, run: Callable = subprocess.run) -> bytes:
    """Run xclip and return its stdout. A non-zero exit yields whatever was printed."""
    try:
        result = run(["xclip", *args], capture_output=True)
    except OSError as e:
        raise AcquisitionError(f"Failed to run xclip: {e}") from e
    return result.stdout


def read_stdin(stdin: BinaryIO) -> bytes | None:
    """Return piped stdin bytes, or None for a terminal or empty stream."""
    if stdin.isatty():
        return None
    try:
        data = stdin.read()
    except OSError:
        return None
    return data or None


def read_clipboard(run: Callable = subprocess.run) -> Payload:
    return Payload.from_bytes(xclip("-selection", "clipboard", "-o", run=run))


def read_selection(run: Callable = subprocess.run) -> Payload:
    targets = xclip("-selection", "primary", "-t", "TARGETS", "-o", run=run)
    targets_str = targets.decode("utf-8", errors="replace")
    if "image/" in targets_str:
        target = next(t for t in IMAGE_TARGETS if t in targets_str)
        data = xclip("-selection", "primary", "-t", target, "-o", run=run)
        return Payload.from_bytes(data, force_binary=True)
    return Payload.from_bytes(xclip("-selection", "primary", "-o", run=run))


def read_file(path: str) -> Payload:
    try:
        return Payload.from_bytes(Path(path).read_bytes())
    except OSError as e:
        raise AcquisitionError(f"Failed to read '{path}': {e}") from e


def acquire(
    args: list[str],
    stdin: BinaryIO | None = None,
    run: Callable = subprocess.run,
) -> tuple[Payload, str]:
    """Read the input selected by args. Returns (payload, source name)."""
    if not args:
        if stdin is None and sys.stdin is not None:
            stdin = sys.stdin.buffer
        data = read_stdin(stdin) if stdin is not None else None
        if data is not None:
            return Payload.from_bytes(data), "stdin"
        return read_clipboard(run=run), "clipboard"

    if args == ["sel"]:
        return read_selection(run=run), "selection"

    if len(args) == 2 and args[0] == "file":
        return read_file(args[1]), "file"

    return Payload.from_text(" ".join(args)), "command line"
