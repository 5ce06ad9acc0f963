"""Tagged success/failure values.

Pure helpers never raise for expected conditions (missing sections, invalid
blocks); they return ``Ok`` or ``Err`` instead. The union is closed, so a
``match`` over it is exhaustive:

    >>> from quadrille import insert_missing_sections
    >>> match insert_missing_sections("# A\\n", ["B"]):
    ...     case Ok(value=text):
    ...         print(text)
    ...     case Err(error=error):
    ...         print(error.errors)

Thread Safety:
    Both variants are frozen and safe to share.

"""

from dataclasses import dataclass
from typing import NoReturn


@dataclass(frozen=True, slots=True)
class Ok[T]:
    """Successful outcome carrying a value."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Return the value."""
        return self.value

    def unwrap_or[D](self, default: D) -> T | D:
        return self.value


@dataclass(frozen=True, slots=True)
class Err[E: Exception]:
    """Failed outcome carrying the problem that caused it."""

    error: E

    @property
    def is_ok(self) -> bool:
        return False

    def unwrap(self) -> NoReturn:
        """Raise the carried error.

        Raises:
            E: always
        """
        raise self.error

    def unwrap_or[D](self, default: D) -> D:
        return default


type Result[T, E: Exception] = Ok[T] | Err[E]


__all__ = [
    "Err",
    "Ok",
    "Result",
]
