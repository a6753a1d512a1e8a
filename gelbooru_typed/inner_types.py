from __future__ import annotations

from typing import Protocol


class Tracker(Protocol):
    def update(self, n: float | None = 1) -> bool | None:
        pass

    def set_postfix_str(self, s: str = "", refresh: bool = True) -> None:
        pass

    def __enter__(self) -> Tracker:
        pass

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        pass


class TrackerFactory(Protocol):
    """
    Anything called like `tqdm` without an iterable.
    """

    def __call__(self,
                 *,
                 desc: str | None = None,
                 total: float | None = None,
                 unit: str = "it",
                 **kwargs,
                 ) -> Tracker: ...
