class MSCError(Exception): ...


class ParseError(MSCError): ...


class EmptyInputError(ParseError): ...


class DayValidationError(MSCError):
    """Raised when a parsed day cannot be encoded safely."""

    def __init__(self, day_key: str, message: str):
        super().__init__(message)
        self.day_key = day_key


class IncompleteDayError(DayValidationError):
    def __init__(self, day_key: str, count: int, expected: int):
        super().__init__(
            day_key, f"Day {day_key} has {count} values, expected exactly {expected}."
        )
        self.count = count
        self.expected = expected


class NonFiniteValueError(DayValidationError):
    def __init__(self, day_key: str, slots: list[int]):
        super().__init__(
            day_key,
            f"Day {day_key} contains non-finite values at slot(s) "
            f"{', '.join(map(str, slots))}.",
        )
        self.slots = slots


class MessageParameterError(MSCError): ...


class BatchError(MSCError): ...


def require(condition: bool, message: str, exc: type[MSCError] = MSCError):
    """Raise the given exception if condition is False."""
    if not condition:
        raise exc(message)
