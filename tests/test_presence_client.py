# tests/test_presence_client.py
import pytest

from presencekit.presence.resolver import ConfigResolver


def test_set_presence_without_argument_uses_stored(make_resolver, sink):
    resolver = make_resolver({"details": "hello", "junk": True})
    resolver.set_presence()
    assert resolver.config == {"details": ["hello"]}
    assert sink.activities == [{"details": "hello"}]


def test_set_presence_returns_sink_result(make_resolver, sink):
    sink.result = "activity"
    assert make_resolver({}).set_presence() == "activity"


def test_update_omitting_timestamp_deletes_it(make_resolver, sink):
    resolver = make_resolver({"state": ["x"], "timestamp": True})
    resolver.set_presence({"state": ["y"]})
    assert resolver.config == {"state": ["y"]}
    assert sink.activities[-1] == {"state": "y"}
    assert resolver.old_timestamp is None


def test_update_is_validated_before_merge(make_resolver):
    resolver = make_resolver({"details": ["a"]})
    resolver.set_presence({"details": "b", "partySize": 12, "partyMax": 4, "bogus": 1})
    assert resolver.config == {"details": ["b"], "partySize": 4, "partyMax": 4}


def test_empty_update_clears_presence(make_resolver, sink):
    resolver = make_resolver({"details": ["a"], "timestamp": "now"})
    resolver.set_presence({})
    assert resolver.config == {}
    assert sink.activities[-1] == {}


def test_timestamp_survives_repeated_updates(make_resolver, sink):
    resolver = make_resolver({"details": ["a"], "timestamp": True})
    resolver.set_presence()
    resolver.set_presence({"details": ["b"], "timestamp": True})
    first, second = sink.activities
    assert first["startTimestamp"] == second["startTimestamp"]


def test_calls_reach_sink_in_order(make_resolver, sink):
    resolver = make_resolver()
    for name in ("one", "two", "three"):
        resolver.set_presence({"state": name})
    assert [a["state"] for a in sink.activities] == ["one", "two", "three"]


def test_init_logs_in_and_waits_for_ready(make_resolver, sink):
    resolver = make_resolver({"details": "hi"})
    assert resolver.init("1234") is True
    assert resolver.client_id == "1234"
    assert sink.logins == ["1234"]
    assert sink.activities == []


@pytest.mark.asyncio
async def test_ready_emits_then_pushes(make_resolver, sink):
    resolver = make_resolver({"details": "hi"})
    order = []
    resolver.on("ready", lambda: order.append(len(sink.activities)))
    resolver.init("1234")
    assert await sink.fire("ready") == 1
    assert order == [0]
    assert sink.activities == [{"details": "hi"}]
    # one-time handler
    assert await sink.fire("ready") == 0
    assert len(sink.activities) == 1


@pytest.mark.asyncio
async def test_ready_awaits_async_sink_result(make_resolver, sink):
    done = []

    async def _change():
        done.append(True)
        return "ok"

    sink.set_activity = lambda payload: _change()
    resolver = make_resolver({})
    resolver.init("1")
    await sink.fire("ready")
    assert done == [True]


def test_sink_is_required():
    with pytest.raises(TypeError):
        ConfigResolver({"details": "hi"})


def test_set_presence_right_after_construction(sink):
    resolver = ConfigResolver({"details": "hi"}, sink=sink)
    resolver.set_presence()
    assert sink.activities == [{"details": "hi"}]


@pytest.mark.asyncio
async def test_async_ready_listener_is_awaited(make_resolver, sink):
    resolver = make_resolver({"details": "hi"})
    seen = []

    async def on_ready():
        seen.append(len(sink.activities))

    resolver.on("ready", on_ready)
    resolver.init("1234")
    await sink.fire("ready")
    assert seen == [0]
    assert len(sink.activities) == 1
