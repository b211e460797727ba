"""Exceptions raised by the core adapter logic."""

from collections.abc import Sequence

from .models import SaveResult


class SaveFailedError(Exception):
    """One or more metadata components failed to save.

    The message is the newline-joined list of every error message the
    metadata API reported.
    """

    def __init__(self, messages: Sequence[str]):
        self.messages = tuple(messages)
        super().__init__("\n".join(self.messages))


class ApiNameMismatchError(ValueError):
    """An update tried to change the api name of an element."""

    def __init__(self, previous: str, new: str):
        self.previous = previous
        self.new = new
        super().__init__(
            f"Failed to update element as api names pre={previous} "
            f"and post={new} are different"
        )


def raise_for_errors(results: Sequence[SaveResult]) -> None:
    """Raise SaveFailedError if any save result carries errors.

    Results of successful components are ignored; messages of every
    failed component are collected in order.

    Raises:
        SaveFailedError: If at least one error entry was reported.
    """
    messages = [
        error.message
        for result in results
        for error in result.errors
    ]
    if messages:
        raise SaveFailedError(messages)
