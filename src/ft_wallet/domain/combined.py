"""Fee settlement across the two balances.

Entry fees are drawn from the deposit balance first and only the shortfall
comes out of winnings, so prize money stays withdrawable for as long as
possible.
"""

from src.ft_common.errors import InsufficientBalanceError
from src.ft_wallet.domain.models import CombinedDebit, Wallet


def split_combined_debit(wallet: Wallet, amount: int) -> CombinedDebit:
    """Return the (deposit, winnings) split for debiting `amount`.

    Raises InsufficientBalanceError if deposit + winnings < amount.
    """
    if amount < 0:
        raise ValueError(f"amount must be >= 0, got {amount}")
    if wallet.total_balance < amount:
        raise InsufficientBalanceError(amount, wallet.total_balance)
    from_deposit = min(wallet.deposit_balance, amount)
    return CombinedDebit(from_deposit=from_deposit, from_winnings=amount - from_deposit)
