"""Defines common errors raised from parameter binding and result mapping."""


class NoPoolSetError(Exception):
    """Raised when there is no pool set for a facade before a sql operation is called."""

    pass


class PoolAlreadySetError(Exception):
    """Raised when a pool is set twice on a facade."""

    pass


class BindingError(Exception):
    """Base exception for errors when binding parameters to a statement."""

    pass


class MappingError(Exception):
    """Base exception for errors related to mapping database results to records."""

    pass


class TemplateError(BindingError):
    """Raised when parsing a template fails."""

    pass


class UnsupportedTypeError(BindingError):
    """Raised when a parameter value has a runtime type with no registered literal renderer."""

    pass


class UnresolvedPlaceholderError(BindingError):
    """Raised when a supplied parameter has no matching placeholder in the statement."""

    pass


class UnboundPlaceholderError(BindingError):
    """Raised when placeholders are left in the statement after all parameters are bound."""

    pass


class ShapeMismatchError(MappingError):
    """Raised when a destination is not the shape (single record or collection of records) the fetch expects."""

    pass
