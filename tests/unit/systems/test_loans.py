"""Unit tests for loan servicing."""

import pytest

from turnengine.config import EconomyTuning
from turnengine.economy import AccountType, EventKind, Loan, LoanStatus
from turnengine.systems.loans import minimum_obligation, payment_due

from tests.helpers.factories import make_character, make_engine


def _loan(remaining, **tuning):
    loan = Loan(1, AccountType.FACTION, "red", remaining, 0.0, 12)
    return loan, EconomyTuning(**tuning)


class TestPaymentDue:
    def test_percentage_rounded_up(self):
        loan, tuning = _loan(1005)
        # ⌈100.5⌉
        assert payment_due(loan, tuning) == 101

    def test_minimum_payment(self):
        loan, tuning = _loan(3, loan_min_payment=2)
        assert payment_due(loan, tuning) == 2

    def test_capped_at_remaining(self):
        loan, tuning = _loan(1, loan_min_payment=5)
        assert payment_due(loan, tuning) == 1

    def test_inactive_loan_owes_nothing(self):
        loan, tuning = _loan(1005)
        loan.mark_default()
        assert payment_due(loan, tuning) == 0

    def test_minimum_obligation(self):
        loan, tuning = _loan(1000, loan_min_payment=5)
        assert minimum_obligation(loan, tuning) == 5
        loan, tuning = _loan(3, loan_min_payment=5)
        assert minimum_obligation(loan, tuning) == 3


class TestServicing:
    def test_interest_then_payment(self, engine):
        engine.funds.add_balance("red", 5000)
        loan_id = engine.create_loan(AccountType.FACTION, "red", 1010, 0.015, 12)

        report = engine.end_of_turn_upkeep()

        assert report.step("loan_servicing").succeeded
        loan = engine.get_loan(loan_id)
        # interest ⌈15.15⌉ = 16 → 1026; due ⌈102.6⌉ = 103
        assert loan.remaining == 923
        (interest,) = engine.log.of_kind(EventKind.LOAN_INTEREST)
        assert interest.amount == 16
        payments = engine.log.of_kind(EventKind.LOAN_PAYMENT)
        assert [p.amount for p in payments] == [-103]
        # 5000 + 1010 disbursed − 30 infrastructure − 103 payment
        assert engine.funds.get_balance("red") == 5877

    def test_default_when_owner_cannot_pay(self, engine):
        engine.characters.save(make_character("c1", funds=0))
        loan_id = engine.create_loan(AccountType.CHARACTER, "c1", 100, 0.0, 12)
        engine.characters.require("c1").funds = 0

        engine.end_of_turn_upkeep()

        loan = engine.get_loan(loan_id)
        assert loan.status is LoanStatus.DEFAULTED
        assert loan.remaining == 100
        (default,) = engine.log.of_kind(EventKind.LOAN_DEFAULT)
        assert default.owner_id == "c1"
        assert default.amount == 0

    def test_defaulted_loan_never_serviced_again(self, engine):
        engine.characters.save(make_character("c1"))
        loan_id = engine.create_loan(AccountType.CHARACTER, "c1", 100, 0.1, 12)
        engine.characters.require("c1").funds = 0
        engine.end_of_turn_upkeep()
        n_events = len(engine.log)

        engine.characters.require("c1").funds = 10_000
        engine.end_of_turn_upkeep()

        assert engine.get_loan(loan_id).status is LoanStatus.DEFAULTED
        assert engine.characters.require("c1").funds == 10_000
        loan_events = [
            e
            for e in engine.log.since(n_events)
            if e.kind in (EventKind.LOAN_INTEREST, EventKind.LOAN_PAYMENT)
        ]
        assert loan_events == []

    def test_faction_in_deficit_defaults(self):
        engine = make_engine(planets=[])
        loan_id = engine.create_loan(AccountType.FACTION, "red", 100, 0.0, 12)
        engine.funds.add_balance("red", -150)

        engine.end_of_turn_upkeep()

        assert engine.get_loan(loan_id).status is LoanStatus.DEFAULTED

    def test_planet_loan_serviced_from_budget(self):
        engine = make_engine(planets=None, loan_payment_pct=0.25)
        loan_id = engine.create_loan(AccountType.PLANET, "p1", 200, 0.0, 12)

        engine.end_of_turn_upkeep()

        assert engine.get_loan(loan_id).remaining == 150
        assert engine.get_planet_budget("p1") == 150

    def test_loan_repaid_over_time(self):
        engine = make_engine(planets=[], loan_payment_pct=0.5, loan_min_payment=10)
        engine.funds.add_balance("red", 1000)
        loan_id = engine.create_loan(AccountType.FACTION, "red", 40, 0.0, 12)

        for _ in range(5):
            engine.end_of_turn_upkeep()

        # 40 → 20 → 10 → 0
        loan = engine.get_loan(loan_id)
        assert loan.status is LoanStatus.REPAID
        assert len(engine.log.of_kind(EventKind.LOAN_PAYMENT)) == 3
        assert engine.funds.get_balance("red") == 1000


@pytest.mark.parametrize("account_type", list(AccountType))
def test_every_account_type_serviced(account_type):
    engine = make_engine(planets=None, loan_payment_pct=0.25)
    engine.characters.save(make_character("c1"))
    owner = {"planet": "p1", "faction": "red", "character": "c1"}[account_type.value]
    loan_id = engine.create_loan(account_type, owner, 400, 0.0, 12)

    engine.end_of_turn_upkeep()

    assert engine.get_loan(loan_id).remaining == 300


class TestPartialPayment:
    def test_short_owner_pays_what_it_has(self):
        engine = make_engine(planets=[])
        loan_id = engine.create_loan(AccountType.FACTION, "red", 1000, 0.0, 12)
        # 1000 disbursed; leave 50 available against a due of 100
        engine.funds.add_balance("red", -950)

        engine.end_of_turn_upkeep()

        loan = engine.get_loan(loan_id)
        assert loan.status is LoanStatus.ACTIVE
        assert loan.remaining == 950
        assert engine.funds.get_balance("red") == 0
        (payment,) = engine.log.of_kind(EventKind.LOAN_PAYMENT)
        assert payment.amount == -50
        assert engine.log.of_kind(EventKind.LOAN_DEFAULT) == []

    def test_exactly_minimum_keeps_loan_active(self):
        engine = make_engine(planets=[], loan_min_payment=20)
        loan_id = engine.create_loan(AccountType.FACTION, "red", 1000, 0.0, 12)
        engine.funds.add_balance("red", -980)

        engine.end_of_turn_upkeep()

        loan = engine.get_loan(loan_id)
        assert loan.status is LoanStatus.ACTIVE
        assert loan.remaining == 980

    def test_below_minimum_defaults(self):
        engine = make_engine(planets=[], loan_min_payment=20)
        loan_id = engine.create_loan(AccountType.FACTION, "red", 1000, 0.0, 12)
        engine.funds.add_balance("red", -981)

        engine.end_of_turn_upkeep()

        loan = engine.get_loan(loan_id)
        assert loan.status is LoanStatus.DEFAULTED
        assert loan.remaining == 1000
        assert engine.funds.get_balance("red") == 19
        assert engine.log.of_kind(EventKind.LOAN_PAYMENT) == []
