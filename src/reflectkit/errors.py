"""The single error kind raised by get-style operations."""

from __future__ import annotations


class InvalidArgumentError(ValueError):
    """A reflective operation could not be performed with the given arguments.

    The underlying failure, when there is one, is chained as ``__cause__``
    and also exposed as :attr:`cause`.
    """

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__
