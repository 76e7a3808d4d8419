"""Exceptions raised by hdifinder."""


class HDFinderError(Exception):
    """Base class for hdifinder errors."""


class InvalidConfiguration(HDFinderError, ValueError):
    """Search parameters are unusable; raised before any scanning starts."""


class DerivationError(HDFinderError):
    """No key or address can be derived at a given index."""
