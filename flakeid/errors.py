from __future__ import annotations


class IdGenError(Exception):
    """Base class for identifier generation failures."""


class InvalidNodeIdError(IdGenError, ValueError):
    def __init__(self, field: str, value: object, maximum: int) -> None:
        self.field = field
        self.value = value
        self.maximum = maximum
        super().__init__(f"{field} must be an integer between 0 and {maximum}, got {value!r}")


class ClockMovedBackwardsError(IdGenError, RuntimeError):
    """
    Raised when the clock reports a time earlier than the last minted id.
    The generator state is left as it was; retrying is up to the caller.
    """

    def __init__(self, last_timestamp_ms: int, current_timestamp_ms: int) -> None:
        self.last_timestamp_ms = last_timestamp_ms
        self.current_timestamp_ms = current_timestamp_ms
        super().__init__(
            "Clock moved backwards by %d ms. Refusing to generate id"
            % (last_timestamp_ms - current_timestamp_ms)
        )
