"""Typed exceptions raised by the service layer and mapped to HTTP in app.api.errors."""


class ServiceError(Exception):
    """Base class for expected business-rule failures."""


class NotFoundError(ServiceError):
    """
    Record is missing or is not visible to the caller.

    Both cases raise the same error so callers cannot probe for
    another owner's records.
    """


class DomainValidationError(ServiceError):
    """Input passed schema validation but breaks a business rule."""
