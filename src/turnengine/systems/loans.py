# src/turnengine/systems/loans.py
"""
Upkeep step 5: loan servicing.
"""
from __future__ import annotations

import math
from collections.abc import Iterable

from turnengine.accounts import Accounts
from turnengine.clock import GameClock
from turnengine.config import EconomyTuning
from turnengine.economy import EconomyLog, EventKind, Loan
from turnengine.logging import getLogger

log = getLogger(__name__)


def payment_due(loan: Loan, tuning: EconomyTuning) -> int:
    """
    due = min(remaining, max(min_payment, ⌈remaining · payment_pct⌉))
    """
    if not loan.is_active:
        return 0
    scheduled = max(tuning.loan_min_payment, math.ceil(loan.remaining * tuning.loan_payment_pct))
    return min(loan.remaining, scheduled)


def minimum_obligation(loan: Loan, tuning: EconomyTuning) -> int:
    """Smallest payment that keeps the loan out of default this turn."""
    if not loan.is_active:
        return 0
    return min(loan.remaining, tuning.loan_min_payment)


def service_loans(
    loans: Iterable[Loan],
    accounts: Accounts,
    econ_log: EconomyLog,
    clock: GameClock,
    tuning: EconomyTuning,
) -> tuple[int, int]:
    """
    Accrue interest on every active loan, then collect this turn's payment.

    Rule
    ----
        interest      = ⌈remaining · r⌉
        due           = min(remaining, max(min_payment, ⌈remaining · pct⌉))
        floor         = min(remaining, min_payment)
        available ≥ floor → pay min(due, available), remaining −= paid
        available < floor → loan defaults (terminal)

    ``available`` is the owner's balance floored at 0. Defaulted and fully
    repaid loans are skipped.

    Returns
    -------
    tuple[int, int]
        Total collected and number of loans that defaulted this turn.
    """
    log.info("--- Servicing Loans ---")
    stamp = clock.stamp()
    collected = 0
    n_defaulted = 0
    for loan in loans:
        if not loan.is_active:
            continue

        interest = loan.accrue_interest()
        econ_log.record(
            stamp,
            EventKind.LOAN_INTEREST,
            loan.owner_id,
            interest,
            f"Loan {loan.id} ({loan.account_type.value}) interest accrued",
        )

        available = accounts.available(loan.account_type, loan.owner_id)
        floor = minimum_obligation(loan, tuning)
        if available < floor:
            loan.mark_default()
            n_defaulted += 1
            econ_log.record(
                stamp,
                EventKind.LOAN_DEFAULT,
                loan.owner_id,
                0,
                f"Loan {loan.id} defaulted with {loan.remaining} remaining",
            )
            log.warning(
                "  Loan %s defaulted: owner %s has %d, minimum is %d",
                loan.id,
                loan.owner_id,
                available,
                floor,
            )
            continue

        amount = min(payment_due(loan, tuning), available)
        if amount <= 0:
            continue
        # amount <= available, so the debit always succeeds
        accounts.debit(loan.account_type, loan.owner_id, amount)
        paid = loan.make_payment(amount)
        collected += paid
        econ_log.record(
            stamp,
            EventKind.LOAN_PAYMENT,
            loan.owner_id,
            -paid,
            f"Loan {loan.id} auto-payment {paid}, remaining {loan.remaining}",
        )
        log.trace("  loan %s: paid %d, remaining %d", loan.id, paid, loan.remaining)

    log.info(f"  Collected {collected:,} in loan payments; {n_defaulted} default(s).")
    return collected, n_defaulted
