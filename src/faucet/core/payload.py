"""Input payload: the data being routed, as text or raw bytes."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import magic

from faucet.core.errors import AcquisitionError


@dataclass(frozen=True)
class Payload:
    """Immutable input data. Exactly one of text/data is set."""

    text: str | None = None
    data: bytes | None = None

    @classmethod
    def from_text(cls, text: str) -> Payload:
        return cls(text=text)

    @classmethod
    def from_bytes(cls, data: bytes, force_binary: bool = False) -> Payload:
        """Decode as UTF-8 text when possible, otherwise keep the bytes."""
        if not force_binary:
            try:
                return cls(text=data.decode("utf-8"))
            except UnicodeDecodeError:
                pass
        return cls(data=data)

    @property
    def is_text(self) -> bool:
        return self.text is not None

    def raw(self) -> bytes:
        if self.text is not None:
            return self.text.encode("utf-8")
        return self.data or b""

    def persist(self, path: Path) -> None:
        """Write the payload to path, replacing any previous run's data."""
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(self.raw())
        except OSError as e:
            raise AcquisitionError(f"Failed to write data file '{path}': {e}") from e

    def matching_text(self, path: Path) -> str:
        """Text that regex scorers see.

        Text payloads drop trailing whitespace; binary payloads are reduced to
        the MIME type of the persisted file (e.g. "image/png").
        """
        if self.text is not None:
            return self.text.rstrip()
        try:
            return magic.from_file(str(path), mime=True).strip()
        except magic.MagicException as e:
            raise AcquisitionError(f"Failed to detect MIME type of '{path}': {e}") from e

    def describe(self, matching_text: str, limit: int = 100) -> str:
        """Short summary for logs."""
        if self.text is None:
            return f"[Binary: {matching_text}]"
        if len(self.text) > limit:
            return self.text[:limit] + "..."
        return self.text


def command_env(payload: Payload, data_file: Path, matching_text: str) -> dict[str, str]:
    """Variables passed to check commands and launched commands."""
    env = {
        "DATA_FILE": str(data_file.resolve()),
        "IS_BINARY": "0" if payload.is_text else "1",
    }
    if payload.is_text:
        env["TEXT"] = matching_text
    return env
