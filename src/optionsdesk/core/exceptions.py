"""Exceptions raised by the pricing and strategy layers."""


class InvalidInputError(ValueError):
    """Non-positive spot/strike/volatility or a malformed leg."""


class StrategyPreconditionError(ValueError):
    """Strikes violate the ordering a strategy family requires."""


class StrategyNotFoundError(KeyError):
    """No registered strategy matches the requested name."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class StrategyValidationError(ValueError):
    """A generated trade setup failed its own consistency checks."""

    def __init__(self, message: str, report=None):
        super().__init__(message)
        self.report = report
