"""Unit tests for fleet maintenance and infrastructure upkeep."""

import pytest

from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.economy import EconomyLog, EventKind
from turnengine.errors import NotFoundError
from turnengine.ledger import FundsLedger
from turnengine.systems.upkeep import (
    charge_fleet_maintenance,
    charge_infrastructure_upkeep,
    fleet_maintenance_pct,
    infrastructure_upkeep,
)
from turnengine.world import (
    CharacterRepository,
    Personality,
    Planet,
    Repository,
    SkillSet,
)

from tests.helpers.factories import make_character, make_fleet


def _repo(kind, items):
    repo = Repository(kind)
    for item in items:
        repo.save(item)
    return repo


def _chars(*items):
    repo = CharacterRepository()
    for c in items:
        repo.save(c)
    return repo


@pytest.fixture
def ctx():
    return FundsLedger(), EconomyLog(), GameClock(3599, 3, 12)


class TestFleetMaintenance:
    def test_pct_without_commander(self):
        assert fleet_maintenance_pct(None, EconomyTuning()) == pytest.approx(0.02)

    def test_pct_with_perfect_commander(self):
        commander = make_character(
            "c1",
            skills=SkillSet(military=100),
            personality=Personality(conscientiousness=100),
        )
        # 0.02 · (1 − 0.25 − 0.10)
        assert fleet_maintenance_pct(commander, EconomyTuning()) == pytest.approx(0.013)

    def test_pct_floored_at_zero(self):
        commander = make_character(
            "c1",
            skills=SkillSet(military=100),
            personality=Personality(conscientiousness=100),
        )
        tuning = EconomyTuning(
            fleet_maint_skill_reduction=0.8, fleet_maint_consc_reduction=0.8
        )
        assert fleet_maintenance_pct(commander, tuning) == 0.0

    def test_charge_without_commander(self, ctx):
        funds, log, clock = ctx
        fleets = _repo("fleet", [make_fleet("f1", "red", ship_costs=(600.0, 400.0))])

        total = charge_fleet_maintenance(
            fleets, _chars(), funds, log, clock, EconomyTuning()
        )

        assert total == 20
        assert funds.get_balance("red") == -20
        (event,) = log
        assert event.kind == EventKind.UPKEEP
        assert (event.year, event.month) == (3599, 3)
        assert event.owner_id == "red"
        assert event.amount == -20
        assert event.note == "Fleet f1 maintenance"

    def test_commander_reduces_charge(self, ctx):
        funds, log, clock = ctx
        commander = make_character(
            "c1",
            skills=SkillSet(military=100),
            personality=Personality(conscientiousness=100),
        )
        fleets = _repo("fleet", [make_fleet("f1", "red", commander_id="c1")])

        total = charge_fleet_maintenance(
            fleets, _chars(commander), funds, log, clock, EconomyTuning()
        )

        assert total == 13
        assert funds.get_balance("red") == -13

    def test_rounds_up(self, ctx):
        funds, log, clock = ctx
        fleets = _repo("fleet", [make_fleet("f1", "red", ship_costs=(101.0,))])
        charge_fleet_maintenance(fleets, _chars(), funds, log, clock, EconomyTuning())
        # 101 · 0.02 = 2.02
        assert funds.get_balance("red") == -3

    def test_empty_fleet_not_charged(self, ctx):
        funds, log, clock = ctx
        fleets = _repo("fleet", [make_fleet("f1", "red", ship_costs=())])
        assert charge_fleet_maintenance(
            fleets, _chars(), funds, log, clock, EconomyTuning()
        ) == 0
        assert len(log) == 0

    def test_missing_commander_raises(self, ctx):
        funds, log, clock = ctx
        fleets = _repo("fleet", [make_fleet("f1", "red", commander_id="ghost")])
        with pytest.raises(NotFoundError, match="character 'ghost'"):
            charge_fleet_maintenance(fleets, _chars(), funds, log, clock, EconomyTuning())

    def test_no_deficit_policy_skips_charge(self, ctx):
        funds, log, clock = ctx
        funds.add_balance("red", 5)
        fleets = _repo("fleet", [make_fleet("f1", "red")])

        total = charge_fleet_maintenance(
            fleets,
            _chars(),
            funds,
            log,
            clock,
            EconomyTuning(allow_deficit_upkeep=False),
        )

        assert total == 0
        assert funds.get_balance("red") == 5
        (event,) = log
        assert event.kind == EventKind.UPKEEP_UNPAID
        assert event.amount == 0


class TestInfrastructureUpkeep:
    def test_without_governor(self):
        planet = Planet("p1", "sol", "red", infrastructure_level=10)
        assert infrastructure_upkeep(planet, None, EconomyTuning()) == 30

    def test_governor_reduces(self):
        planet = Planet("p1", "sol", "red", infrastructure_level=10)
        governor = make_character("g1", skills=SkillSet(economy=100))
        # 30 · (1 − 0.30)
        assert infrastructure_upkeep(planet, governor, EconomyTuning()) == 21

    def test_governor_conscientiousness(self):
        planet = Planet("p1", "sol", "red", infrastructure_level=10)
        governor = make_character(
            "g1",
            skills=SkillSet(economy=50),
            personality=Personality(conscientiousness=50),
        )
        # 30 · (1 − 0.15 − 0.05)
        assert infrastructure_upkeep(planet, governor, EconomyTuning()) == 24

    def test_charges_owning_faction(self, ctx):
        funds, log, clock = ctx
        planets = _repo(
            "planet",
            [
                Planet("p1", "sol", "red", infrastructure_level=10),
                Planet("p2", "vega", "blue", infrastructure_level=4),
            ],
        )

        total = charge_infrastructure_upkeep(
            planets, _chars(), funds, log, clock, EconomyTuning()
        )

        assert total == 42
        assert funds.get_balance("red") == -30
        assert funds.get_balance("blue") == -12
        assert [e.note for e in log] == [
            "Planet p1 infrastructure",
            "Planet p2 infrastructure",
        ]

    def test_zero_level_not_charged(self, ctx):
        funds, log, clock = ctx
        planets = _repo("planet", [Planet("p1", "sol", "red", infrastructure_level=0)])
        charge_infrastructure_upkeep(planets, _chars(), funds, log, clock, EconomyTuning())
        assert len(log) == 0

    def test_missing_governor_raises(self, ctx):
        funds, log, clock = ctx
        planets = _repo("planet", [Planet("p1", "sol", "red", governor_id="ghost")])
        with pytest.raises(NotFoundError):
            charge_infrastructure_upkeep(
                planets, _chars(), funds, log, clock, EconomyTuning()
            )
