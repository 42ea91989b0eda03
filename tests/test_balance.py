from decimal import Decimal

from settlement.balance import BalanceGuard, check_balance

ONE_ETH = 10**18


class FakeSource:
    def __init__(self, balance=None, error=None):
        self.balance = balance
        self.error = error

    def get_balance(self):
        if self.error:
            raise self.error
        return self.balance


def test_check_balance_warns_below_threshold():
    assert check_balance(ONE_ETH // 1000, ONE_ETH // 100) is not None
    assert check_balance(ONE_ETH // 100, ONE_ETH // 100) is None
    assert check_balance(ONE_ETH, ONE_ETH // 100) is None


def test_guard_returns_warning_for_low_balance(caplog):
    guard = BalanceGuard(FakeSource(balance=ONE_ETH // 1000), Decimal("0.01"))

    with caplog.at_level("WARNING"):
        warning = guard.run()

    assert warning is not None
    assert "0.001" in warning
    assert any(record.levelname == "WARNING" for record in caplog.records)


def test_guard_is_silent_when_funded():
    guard = BalanceGuard(FakeSource(balance=2 * ONE_ETH))
    assert guard.threshold_wei == ONE_ETH // 100
    assert guard.run() is None


def test_guard_never_raises_on_read_failure():
    guard = BalanceGuard(FakeSource(error=ConnectionError("rpc down")))
    assert guard.run() is None
