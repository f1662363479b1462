# claimright/errors.py
# Errors raised by the claiming-strategy engine.


class DomainRangeError(ValueError):
    """A claiming age falls outside the supported claiming window."""

    def __init__(self, label: str, age, min_age, max_age):
        self.label = label
        self.age = age
        self.min_age = min_age
        self.max_age = max_age
        super().__init__(f"{label} claiming age {age} is outside the supported range {min_age}-{max_age}")


class MissingSpouseDataError(ValueError):
    """A married household was supplied without a spouse record."""
