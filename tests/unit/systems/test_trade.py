"""Unit tests for trade valuation and route settlement."""

import numpy as np

from turnengine.economy import EventKind
from turnengine.starmap import InMemoryStarmap, StarSystem
from turnengine.systems.trade import (
    route_values,
    settle_trade_routes,
    smuggling_split,
    tariff_amounts,
)
from turnengine.world import Planet

from tests.helpers.factories import make_engine


class TestRouteValues:
    def test_matches_formula(self):
        values = route_values(
            np.array([10, 10, 3]),
            np.array([0.0, 100.0, 1000.0]),
            base_unit_value=5,
            distance_scale=1000.0,
        )
        np.testing.assert_array_equal(values, [50, 55, 30])
        assert values.dtype == np.int64

    def test_half_rounds_up(self):
        # 1 · 5 · 1.1 = 5.5
        values = route_values(
            np.array([1]), np.array([100.0]), base_unit_value=5, distance_scale=1000.0
        )
        assert values[0] == 6

    def test_farther_is_worth_more(self):
        near, far = route_values(
            np.array([10, 10]),
            np.array([10.0, 100.0]),
            base_unit_value=5,
            distance_scale=1000.0,
        )
        assert far > near


def test_tariff_amounts_floor():
    np.testing.assert_array_equal(
        tariff_amounts(np.array([55, 55, 99]), np.array([10, 0, 75])), [5, 0, 74]
    )


class TestSmugglingSplit:
    def test_two_pirates(self):
        assert smuggling_split(55, "reavers", "corsairs") == {
            "reavers": 27,
            "corsairs": 28,
        }

    def test_same_pirate_both_ends(self):
        assert smuggling_split(55, "reavers", "reavers") == {"reavers": 55}

    def test_missing_pirate_forfeits(self):
        assert smuggling_split(55, None, "corsairs") == {"corsairs": 28}
        assert smuggling_split(55, None, None) == {}


class TestSettlement:
    def test_legit_route_credits_destination(self, engine):
        engine.create_trade_route("p1", "p2", 10)

        report = engine.end_of_turn_upkeep()

        assert report.succeeded
        assert engine.get_planet_budget("p2") == 55
        assert engine.get_planet_budget("p1") == 0
        (trade,) = engine.log.of_kind(EventKind.TRADE)
        assert trade.owner_id == "p2"
        assert trade.amount == 55
        assert trade.note == "Route 1 value 55 (p1->p2)"

    def test_tariff_split(self, engine):
        engine.set_tariff("blue", 10)
        engine.create_trade_route("p1", "p2", 10)

        engine.end_of_turn_upkeep()

        # blue also pays p2's infrastructure (30)
        assert engine.get_planet_budget("p2") == 50
        assert engine.funds.get_balance("blue") == 5 - 30
        (tariff,) = engine.log.of_kind(EventKind.TARIFF)
        assert (tariff.owner_id, tariff.amount) == ("blue", 5)

    def test_smuggling_pays_pirates(self, engine):
        engine.starmap.register_pirate_base("reavers", "rigel")
        engine.set_tariff("blue", 50)
        engine.create_trade_route("p1", "p2", 10, smuggling=True)

        engine.end_of_turn_upkeep()

        assert engine.funds.get_balance("reavers") == 55
        assert engine.get_planet_budget("p2") == 0
        assert engine.log.of_kind(EventKind.TARIFF) == []
        assert engine.log.of_kind(EventKind.TRADE) == []
        smuggled = engine.log.of_kind(EventKind.SMUGGLING)
        assert [(e.owner_id, e.amount) for e in smuggled] == [("reavers", 55)]

    def test_smuggling_without_pirates_pays_nobody(self, engine):
        engine.create_trade_route("p1", "p2", 10, smuggling=True)
        report = engine.end_of_turn_upkeep()
        assert report.succeeded
        assert engine.log.of_kind(EventKind.SMUGGLING) == []

    def test_missing_planet_skips_only_that_route(self, engine):
        engine.create_trade_route("p1", "p2", 10)
        engine.create_trade_route("p1", "ghost", 10)
        engine.create_trade_route("ghost", "p1", 10, smuggling=True)

        report = engine.end_of_turn_upkeep()

        assert report.step("trade_settlement").succeeded
        assert engine.get_planet_budget("p2") == 55
        (trade,) = engine.log.of_kind(EventKind.TRADE)
        assert trade.note.startswith("Route 1 ")
        assert engine.log.of_kind(EventKind.SMUGGLING) == []

    def test_missing_planet_route_valued_zero(self, engine):
        engine.create_trade_route("p1", "ghost", 10)
        engine.create_trade_route("p1", "p2", 10)

        values = settle_trade_routes(
            engine.trade_routes(),
            engine.planets,
            engine.starmap,
            engine.budgets,
            engine.funds,
            {},
            engine.log,
            engine.clock,
            engine.tuning,
        )

        np.testing.assert_array_equal(values, [0, 55])

    def test_routes_settled_every_turn(self, engine):
        engine.create_trade_route("p1", "p2", 10)
        engine.end_of_turn_upkeep()
        engine.end_of_turn_upkeep()
        assert engine.get_planet_budget("p2") == 110


def test_longer_route_logs_larger_trade():
    sm = InMemoryStarmap()
    sm.add_system(StarSystem("home", 0.0, 0.0))
    sm.add_system(StarSystem("near", 10.0, 0.0))
    sm.add_system(StarSystem("far", 100.0, 0.0))
    engine = make_engine(
        starmap=sm,
        planets=[
            Planet("h", "home", "red", infrastructure_level=0),
            Planet("n", "near", "red", infrastructure_level=0),
            Planet("f", "far", "red", infrastructure_level=0),
        ],
    )
    engine.create_trade_route("h", "n", 10)
    engine.create_trade_route("h", "f", 10)

    engine.end_of_turn_upkeep()

    near, far = (e.amount for e in engine.log.of_kind(EventKind.TRADE))
    assert (near, far) == (51, 55)


def test_mirrored_smuggling_routes_pay_each_pirate_55():
    sm = InMemoryStarmap()
    sm.add_system(StarSystem("a", 0.0, 0.0))
    sm.add_system(StarSystem("b", 100.0, 0.0))
    sm.register_pirate_base("pirate1", "a")
    sm.register_pirate_base("pirate2", "b")
    engine = make_engine(
        starmap=sm,
        planets=[
            Planet("pa", "a", "red", infrastructure_level=0),
            Planet("pb", "b", "blue", infrastructure_level=0),
        ],
    )
    engine.create_trade_route("pa", "pb", 10, smuggling=True)
    engine.create_trade_route("pb", "pa", 10, smuggling=True)

    report = engine.end_of_turn_upkeep()

    assert report.succeeded
    # each route is worth 55: 27 to the origin's pirate, 28 to the destination's
    assert engine.funds.get_balance("pirate1") == 55
    assert engine.funds.get_balance("pirate2") == 55
    smuggled = engine.log.of_kind(EventKind.SMUGGLING)
    assert [(e.owner_id, e.amount) for e in smuggled] == [
        ("pirate1", 27),
        ("pirate2", 28),
        ("pirate2", 27),
        ("pirate1", 28),
    ]
    assert engine.get_planet_budget("pa") == engine.get_planet_budget("pb") == 0
