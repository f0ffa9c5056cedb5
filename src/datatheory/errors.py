"""Exceptions raised while resolving theory data."""


class DataTheoryError(Exception):
    """Base class for datatheory errors."""


class ProviderResolutionError(DataTheoryError):
    """No data provider is registered for a directive."""


class DataProviderError(DataTheoryError):
    """A data provider could not produce its rows."""


class DataRowError(DataTheoryError, TypeError):
    """A provider yielded a row that cannot be bound to the method."""


class NoDataError(DataTheoryError):
    """A theory resolved to zero data rows at run time."""
