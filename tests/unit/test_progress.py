from __future__ import annotations

from quick_roster.services import progress
from quick_roster.services.progress import ProgressTracker


def test_progress_disabled_without_tty(monkeypatch):
    monkeypatch.setattr(progress, "is_tty_enabled", lambda: False)
    with ProgressTracker(3, description="Parsing jobs.csv") as tracker:
        assert tracker.pbar is None
        tracker.advance()
        tracker.advance(2)
        tracker.set_postfix(rejected=1)
    assert tracker.done == 3


def test_progress_uses_tqdm_on_tty(monkeypatch):
    created = []

    class FakeBar:
        def __init__(self, **kwargs):
            self.kwargs = kwargs
            self.n = 0
            self.postfix = None
            self.closed = False
            created.append(self)

        def update(self, n):
            self.n += n

        def set_postfix(self, **kwargs):
            self.postfix = kwargs

        def close(self):
            self.closed = True

    monkeypatch.setattr(progress, "is_tty_enabled", lambda: True)
    monkeypatch.setattr(progress, "tqdm", FakeBar)
    with ProgressTracker(2, description="Parsing staff.xlsx") as tracker:
        tracker.advance()
        tracker.set_postfix(rejected=0)

    (bar,) = created
    assert bar.kwargs["total"] == 2
    assert bar.kwargs["desc"] == "Parsing staff.xlsx"
    assert bar.kwargs["unit"] == "row"
    assert bar.n == 1
    assert bar.postfix == {"rejected": 0}
    assert bar.closed
    assert tracker.pbar is None
