"""Exceptions raised by the economy calculator."""


class EconomyCalcError(Exception):
    """Base exception for the calculator."""


class InvalidEconomyDataError(EconomyCalcError):
    """An economy document is structurally invalid (bad date, unknown category...)."""


class UnknownTaxYearError(EconomyCalcError):
    """No tax rules are registered for the requested year."""


class ProviderResponseError(EconomyCalcError):
    """A listing or reference-budget payload is malformed."""
