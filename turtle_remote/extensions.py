"""Optional protocol extensions a server may support."""

from __future__ import annotations

from enum import Enum
from typing import Any


class Extension(Enum):
    """A named protocol extension."""

    POSITION_TRACKING = "trc_position_tracking"
    PATHFINDING = "trc_pathfinding"

    def string_ident(self) -> str:
        """The extension's wire name."""
        return self.value

    @classmethod
    def from_json(cls, data: Any) -> Extension:
        """Look an extension up by its wire name."""
        try:
            return cls(data)
        except ValueError:
            raise ValueError(f"unknown extension: {data!r}") from None