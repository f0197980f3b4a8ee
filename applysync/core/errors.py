class ApplySyncError(Exception):
    """Base class for errors raised by the subscription backend."""


class StoreFailure(ApplySyncError):
    """A lookup or insert against the subscriber store failed."""


class DuplicateSubscriber(ApplySyncError):
    """The store's unique index rejected an insert."""

    def __init__(self, email: str):
        super().__init__(f"{email} is already stored")
        self.email = email


class StartupFailure(ApplySyncError):
    """The store could not be reached while the app was starting."""
