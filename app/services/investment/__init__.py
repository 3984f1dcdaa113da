"""
Investment services package.

- lifecycle: Deposit approval and investment creation
- settlement: Exactly-once maturity payouts and the sweep
"""

from app.services.investment.lifecycle import (
    ApprovalResult,
    InvestmentLifecycleManager,
)
from app.services.investment.settlement import (
    InvestmentSettlementProcessor,
    MaturitySweep,
    SettlementResult,
    SweepReport,
)

__all__ = [
    "ApprovalResult",
    "InvestmentLifecycleManager",
    "InvestmentSettlementProcessor",
    "MaturitySweep",
    "SettlementResult",
    "SweepReport",
]
