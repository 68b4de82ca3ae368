import asyncio

from turtle_remote.server_turtle import ServerTurtle
from turtle_remote.turtle import Turtle
from turtle_remote.turtle_map import TurtleMap


class _Ws:
    def __init__(self):
        self.sent = []

    async def send(self, text):
        self.sent.append(text)

    async def close(self):
        pass


def _server_turtle(index, world, instance_id):
    return ServerTurtle(Turtle(index=index, world=world, name="t"), _Ws(), asyncio.Queue(), None,
                        instance_id=instance_id)


def test_push_and_get():
    turtles = TurtleMap()
    st = _server_turtle(1, "w", 100)
    assert turtles.push(st) is turtles
    assert turtles.get(100) is st
    assert turtles.get(101) is None


def test_push_chains_and_counts():
    turtles = TurtleMap()
    turtles.push(_server_turtle(1, "w", 100)).push(_server_turtle(2, "w", 200))
    assert len(turtles) == 2
    assert 200 in turtles


def test_push_same_instance_replaces():
    turtles = TurtleMap()
    first = _server_turtle(1, "w", 100)
    second = _server_turtle(2, "w", 100)
    turtles.push(first).push(second)
    assert len(turtles) == 1
    assert turtles.get(100) is second


def test_find_by_index_and_world():
    turtles = TurtleMap()
    a = _server_turtle(1, "w", 100)
    b = _server_turtle(1, "nether", 200)
    turtles.push(a).push(b)
    assert turtles.find(1, "w") is a
    assert turtles.find(1, "nether") is b
    assert turtles.find(1, "end") is None
    assert turtles.find(2, "w") is None


def test_drop():
    turtles = TurtleMap()
    st = _server_turtle(1, "w", 100)
    turtles.push(st)
    assert turtles.drop(100) is st
    assert turtles.get(100) is None
    assert turtles.drop(100) is None


def test_common_turtles_are_copies():
    turtles = TurtleMap()
    st = _server_turtle(4, "w", 100)
    turtles.push(st)
    copies = turtles.common_turtles()
    assert [t.index for t in copies] == [4]
    copies[0].name = "changed"
    assert st.turtle.name == "t"