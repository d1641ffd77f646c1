"""Exceptions raised by flatcad.

Failures raised by an injected kernel or host are never wrapped; only
the conditions below originate in this package.
"""


class FlatcadError(Exception):
    """Base exception for flatcad errors."""
    pass


class TransformError(FlatcadError):
    """A coordinate transform request was rejected."""

    message = "Invalid arguments in coordinate transform request."

    def __init__(self, detail=None):
        self.detail = detail
        super().__init__(self.message)


class InvalidFrameCode(TransformError, ValueError):
    """A named frame code outside the 0..3 range."""
    pass


class InvalidFrameCombination(TransformError, ValueError):
    """PSDCS used in tile mode or paired with anything but DCS."""
    pass


class NativeTransformFailure(TransformError, RuntimeError):
    """The host transform primitive reported a non-success status."""

    def __init__(self, status=None):
        self.status = status
        super().__init__()


class HostNotConfigured(FlatcadError, RuntimeError):
    """No host was given and no default host has been set."""
    pass


class NullArgument(FlatcadError, ValueError):
    """A required argument was ``None``."""

    def __init__(self, name: str):
        self.name = name
        super().__init__("argument '{}' must not be None".format(name))
