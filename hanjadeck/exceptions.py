"""Exception hierarchy for the Hanja data layer."""


class HanjaDeckError(Exception):
    """Base class for all hanjadeck errors."""


class StorageError(HanjaDeckError):
    """Raised for failures in the embedded storage engine."""


class StorageInitializationError(StorageError):
    """The database could not be opened or its schema could not be created."""


class StorageNotInitializedError(StorageError):
    """An operation was issued before initialize() or after close()."""


class SeedError(HanjaDeckError):
    """Bulk seeding failed and was rolled back."""


class InvalidGradeError(HanjaDeckError, ValueError):
    """A value could not be parsed into a HanjaGrade."""
