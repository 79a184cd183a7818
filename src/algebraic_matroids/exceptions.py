"""Exception hierarchy for algebraic matroid computations."""


class AlgebraicMatroidError(Exception):
    """Base class for errors raised by this package."""


class NotPrimeError(AlgebraicMatroidError, ValueError):
    """The ideal passed to `AlgebraicMatroid` is not prime."""


class InvalidSubsetError(AlgebraicMatroidError, ValueError):
    """A queried subset is not contained in the ground set."""


class NoCircuitFoundError(AlgebraicMatroidError, RuntimeError):
    """No subset of B ∪ {x} is a circuit."""


class DegreeMismatchError(AlgebraicMatroidError, RuntimeError):
    """Independent random draws of `base_degree` disagreed."""

    def __init__(self, degrees):
        self.degrees = tuple(degrees)
        super().__init__(f"base degree is not stable across random points: {list(self.degrees)}")


class EngineError(AlgebraicMatroidError, RuntimeError):
    """An algebra engine could not carry out a computation."""


class PrimalityUndecidedError(EngineError):
    """The engine cannot decide whether an ideal is prime."""


class SingularError(EngineError):
    """Singular exited with an error or produced unreadable output."""
