"""Exceptions raised by the benchmark pipeline."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from benchplan.validators.models import ValidationError


class InvalidBenchmarkDeclarationError(ValueError):
    """A benchmark declaration is malformed or cannot be resolved."""


class ValidationFailedError(RuntimeError):
    """Raised when a validation pass produced at least one critical error."""

    def __init__(self, errors: Sequence["ValidationError"]) -> None:
        self.errors = tuple(errors)
        lines = [error.message for error in self.errors]
        super().__init__(f"{len(lines)} critical validation error(s):\n" + "\n".join(lines))
