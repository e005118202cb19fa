from __future__ import annotations


def test_first_signal_stops_at_first_hit():
    from steam_game_lookup.signals.probes import first_signal

    ran: list[str] = []

    def probe(name, value):
        def _fn():
            ran.append(name)
            return value

        return name, _fn

    got = first_signal([probe("a", None), probe("b", 7), probe("c", 9)], context="test")
    assert got == ("b", 7)
    assert ran == ["a", "b"]


def test_first_signal_treats_exceptions_and_rejections_as_silent():
    from steam_game_lookup.signals.probes import first_signal

    def boom():
        raise RuntimeError("down")

    probes = [("boom", boom), ("zero", lambda: 0), ("ok", lambda: 3)]
    assert first_signal(probes, context="test", is_signal=bool) == ("ok", 3)
    assert first_signal([("boom", boom)], context="test") == (None, None)

