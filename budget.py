"""Per-run budget of remote API operations."""


class OperationBudget:
    """Counts remote calls against the `operations-per-run` limit.

    Callers check `exhausted()` before a remote call and `charge()` once for
    every call they actually made. Nothing here issues or blocks calls.
    """

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self.remaining = limit

    @property
    def spent(self) -> int:
        return self.limit - self.remaining

    def charge(self, n: int = 1) -> int:
        if n < 0:
            raise ValueError("cannot charge a negative number of operations")
        self.remaining -= n
        return self.remaining

    def exhausted(self) -> bool:
        return self.remaining <= 0

    def __repr__(self) -> str:
        return f"OperationBudget(limit={self.limit}, remaining={self.remaining})"
