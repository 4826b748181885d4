from __future__ import annotations


class ValidationError(ValueError):
    """Raised before a run starts when an input is out of range.

    Only the first invalid field is reported; nothing is simulated.
    """

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"{field}: {reason}")
