class InvalidSpecificationError(ValueError):
    """Raised when bike specifications cannot be sized (non-positive weight, speed, ...)."""


class InvalidWiringInputError(ValueError):
    """Raised when a wire selection request has a non-positive current, length or voltage."""
