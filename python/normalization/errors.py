"""
Normalization errors.

Every error is a ValueError so callers catching the generic case keep working.
"""


class NormalizationError(ValueError):
    """Base class for all normalization errors."""


class InconsistentParameterDimensions(NormalizationError):
    """Supplied parameter arrays disagree in count or shape."""


class ShapeMismatch(NormalizationError):
    """An operand cannot be broadcast against the reference array."""


class UnfitNormalizationError(NormalizationError):
    """Inverse transform requested before the parameters were fit."""


class UnknownNormalization(NormalizationError, KeyError):
    """Name not present in the normalization registry."""

    def __str__(self):
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""


class AxisOutOfRange(NormalizationError, IndexError):
    """Axis index outside the array rank, duplicated, or not an integer."""
