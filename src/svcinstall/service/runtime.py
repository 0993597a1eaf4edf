"""The language runtime a service is registered next to.

Rendered PATH values always let the service find the interpreter that
installed it, plus the user's script directory for that interpreter.
"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePosixPath, PureWindowsPath


@dataclass(frozen=True)
class Runtime:
    """Interpreter identity used when rendering service artifacts."""

    label: str
    executable: str
    # Relative to the service owner's home directory
    home_bin: tuple[str, ...] = (".local", "bin")

    @classmethod
    def current(cls) -> Runtime:
        """Describe the running Python interpreter."""
        return cls(label="Python", executable=sys.executable)

    @property
    def description_suffix(self) -> str:
        return f"({self.label} Service)"

    def search_path(
        self, home: str, extra: Sequence[str] = (), windows: bool = False
    ) -> list[str]:
        """Build the ordered PATH entries for a service.

        Args:
            home: Home directory of the service owner.
            extra: Caller-supplied directories, kept in order.
            windows: Use Windows path semantics for the runtime directories.

        Returns:
            Caller directories, then the interpreter directory, then the
            home-relative script directory.
        """
        pure = PureWindowsPath if windows else PurePosixPath
        return [
            *extra,
            str(pure(self.executable).parent),
            str(pure(home, *self.home_bin)),
        ]
