"""
Exceptions and warnings raised by the biophysical models and their orchestration
"""


class InitialisationError(Exception):
    """A variable needed by a model is not initialised, or a model dependency is missing."""

    def __init__(self, message, missing=()):
        super().__init__(message)
        self.missing = tuple(missing)


class InvalidRootError(ArithmeticError):
    """The coupled assimilation and conductance system has no physically valid solution."""
    pass


class ShapeMismatchError(ValueError):
    """Sequence inputs that should describe the same time-steps have different lengths."""
    pass


class NonConvergenceWarning(RuntimeWarning):
    """An iterative solver reached its iteration limit before converging."""
    pass
