"""Errors raised by the account store."""


class AccountNotFoundError(LookupError):
    """No account row matched the lookup."""


class DuplicateEmailError(ValueError):
    """An account with the given email address already exists."""

    def __init__(self, email: str) -> None:
        super().__init__("An account with the given email address already exists")
        self.email = email
