"""
Error types raised to callers.

Bad input is reported with ``ValueError`` subclasses so that callers who
already guard with ``except ValueError`` keep working.
"""


class GeometryError(ValueError):
    """Base class for errors about geometric input."""


class InvalidGeometry(GeometryError):
    """
    Malformed geometry: a non-finite coordinate, too few coordinates,
    an unclosed or empty ring, a member of the wrong type, or a
    collection nested deeper than the configured limit.
    """


class InvalidPattern(GeometryError):
    """Malformed DE-9IM matrix or pattern string."""
