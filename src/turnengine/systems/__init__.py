"""Economy systems run by `EconomicEngine.end_of_turn_upkeep`, in order:

1. upkeep.charge_fleet_maintenance
2. upkeep.charge_infrastructure_upkeep
3. salaries.pay_salaries
4. trade.settle_trade_routes
5. loans.service_loans
"""

from turnengine.systems.loans import minimum_obligation, payment_due, service_loans
from turnengine.systems.salaries import pay_salaries, salary_for
from turnengine.systems.trade import (
    route_values,
    settle_trade_routes,
    smuggling_split,
    tariff_amounts,
)
from turnengine.systems.upkeep import (
    charge_fleet_maintenance,
    charge_infrastructure_upkeep,
    fleet_maintenance_pct,
    infrastructure_upkeep,
)

__all__ = [
    "charge_fleet_maintenance",
    "charge_infrastructure_upkeep",
    "fleet_maintenance_pct",
    "infrastructure_upkeep",
    "pay_salaries",
    "salary_for",
    "route_values",
    "tariff_amounts",
    "smuggling_split",
    "settle_trade_routes",
    "minimum_obligation",
    "payment_due",
    "service_loans",
]
