"""Storage exceptions."""


class PersistenceError(Exception):
    """A topic universe could not be written or read."""
