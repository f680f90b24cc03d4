"""
Exceptions raised by the Control Tower analytics layer.
"""


class DataUnavailable(RuntimeError):
    """A required collection was not handed to the aggregation layer.

    Raised instead of computing over a missing snapshot. The caller owns
    retry/backoff and user-facing messaging.
    """

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Required collection '{name}' is unavailable")
