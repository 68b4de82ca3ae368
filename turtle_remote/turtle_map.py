"""Connected turtles keyed by their connection instance id."""

from __future__ import annotations

import copy
import logging
from typing import Iterator, Optional

from .server_turtle import ServerTurtle
from .turtle import Turtle

log = logging.getLogger(__name__)


class TurtleMap:
    """The turtles currently connected to the server."""

    def __init__(self) -> None:
        self._turtles: dict[int, ServerTurtle] = {}

    def push(self, turtle: ServerTurtle) -> TurtleMap:
        log.info("Registering Turtle: %s, %s", turtle.turtle.world, turtle.turtle.index)
        self._turtles[turtle.instance_id] = turtle
        return self

    def common_turtles(self) -> list[Turtle]:
        """Independent copies of every connected turtle's state."""
        return [copy.deepcopy(st.turtle) for st in self._turtles.values()]

    def get(self, instance_id: int) -> Optional[ServerTurtle]:
        return self._turtles.get(instance_id)

    def find(self, index: int, world: str) -> Optional[ServerTurtle]:
        """The connected turtle with this index in this world, if any."""
        return next(
            (
                st
                for st in self._turtles.values()
                if st.turtle.index == index and st.turtle.world == world
            ),
            None,
        )

    def drop(self, instance_id: int) -> Optional[ServerTurtle]:
        return self._turtles.pop(instance_id, None)

    def __len__(self) -> int:
        return len(self._turtles)

    def __contains__(self, instance_id: object) -> bool:
        return instance_id in self._turtles

    def __iter__(self) -> Iterator[ServerTurtle]:
        return iter(list(self._turtles.values()))