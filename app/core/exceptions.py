class SlugConflictError(Exception):
    """Raised when a unique slug could not be persisted after retrying."""

    def __init__(self, collection: str, slug: str, attempts: int):
        self.collection = collection
        self.slug = slug
        self.attempts = attempts
        super().__init__(
            f"Could not store unique slug '{slug}' in '{collection}' after {attempts} attempts"
        )


class ToggleTargetNotFound(Exception):
    """Raised when the document holding a toggled set does not exist."""


class ToggleConflictError(Exception):
    """Raised when a toggle kept racing with concurrent writers."""
