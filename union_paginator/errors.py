"""Union pagination error types."""


class UnionPaginatorError(Exception):
    """Base class for union pagination configuration errors."""


class InvalidEntityType(UnionPaginatorError, TypeError):
    """Raised when a value cannot participate in a union as a record type."""


class NoEntityTypesRegistered(UnionPaginatorError, RuntimeError):
    """Raised when a union is built before any entity type was registered."""

    def __init__(self, message: str = "No entity types have been added to the UnionPaginator.") -> None:
        super().__init__(message)


class InvalidPageSize(UnionPaginatorError, ValueError):
    """Raised for a non-positive page size."""


class MisalignedProjection(UnionPaginatorError, ValueError):
    """Raised when union branches do not select the same number of columns."""


class InvalidScope(UnionPaginatorError, TypeError):
    """Raised when a scope does not return a narrowed select of the same shape."""


class UnregisteredEntityType(UnionPaginatorError, LookupError):
    """Raised when configuration targets an entity type the paginator does not know."""


class InvalidOrdering(UnionPaginatorError, ValueError):
    """Raised when ordering names a column the union does not expose or an unknown direction."""
