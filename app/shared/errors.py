class CatalogError(Exception):
    """Base class for failures reported to API callers."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(CatalogError):
    status_code = 400


class DuplicateName(CatalogError):
    status_code = 400


class NotFound(CatalogError):
    status_code = 404


class TransactionFailure(CatalogError):
    """A multi-document write was aborted; nothing from it was applied."""

    status_code = 500


class StoreError(CatalogError):
    status_code = 500
