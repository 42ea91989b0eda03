from settlement.events import EventSnapshot
from settlement.poller import SettlementPoller


class FakeFeed:
    def __init__(self, batches):
        self.batches = list(batches)
        self.calls = 0

    def fetch(self):
        self.calls += 1
        if self.batches:
            return self.batches.pop(0)
        return []


class RecordingEngine:
    def __init__(self, log):
        self.log = log
        self.cycles = []

    def process_cycle(self, snapshots):
        self.log.append("engine")
        self.cycles.append([snap.event_id for snap in snapshots])


class RecordingGuard:
    def __init__(self, log):
        self.log = log

    def run(self):
        self.log.append("balance")
        return None


def game(event_id):
    return EventSnapshot(event_id=event_id, name=event_id, completed=False)


def test_cycle_runs_engine_then_balance_check():
    log = []
    engine = RecordingEngine(log)
    poller = SettlementPoller(FakeFeed([[game("401")]]), engine, RecordingGuard(log), interval_seconds=300)

    poller.run_cycle()

    assert log == ["engine", "balance"]
    assert engine.cycles == [["401"]]


def test_empty_feed_still_checks_balance():
    log = []
    poller = SettlementPoller(FakeFeed([]), RecordingEngine(log), RecordingGuard(log), interval_seconds=300)

    poller.run_cycle()

    assert log == ["engine", "balance"]


def test_run_forever_starts_immediately_and_sleeps_between_cycles():
    log = []
    sleeps = []
    feed = FakeFeed([[game("401")], [game("402")], [game("403")]])
    engine = RecordingEngine(log)

    def sleep(delay):
        sleeps.append(delay)
        if len(sleeps) == 3:
            raise KeyboardInterrupt

    poller = SettlementPoller(feed, engine, RecordingGuard(log), interval_seconds=300, sleep=sleep)

    poller.run_forever()

    assert log[0] == "balance"
    assert engine.cycles == [["401"], ["402"], ["403"]]
    assert len(sleeps) == 3
    assert all(0 <= delay <= 300 for delay in sleeps)


def test_keyboard_interrupt_stops_loop():
    log = []

    def interrupt(_delay):
        raise KeyboardInterrupt

    poller = SettlementPoller(FakeFeed([]), RecordingEngine(log), None, interval_seconds=60, sleep=interrupt)
    poller.run_forever()

    assert log == ["engine"]
