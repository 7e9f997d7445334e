"""User-domain errors raised by registration and profile management."""

from academy.core.exceptions import BadRequestError, ConflictError, ForbiddenError, NotFoundError

ADULT_AGE = 18


def _prefixed(context: str, message: str) -> str:
    return f"{context}: {message}" if context else message


class GuardianRequiredError(BadRequestError):
    """A self-registering individual is under the adult age."""

    def __init__(self, context: str = ""):
        super().__init__(
            _prefixed(
                context,
                f"Users under {ADULT_AGE} must be registered by a parent or guardian.",
            ),
            error_code="GUARDIAN_REQUIRED",
        )


class DependentTooOldError(BadRequestError):
    """A dependent is at or over the adult age."""

    def __init__(self, context: str = ""):
        super().__init__(
            _prefixed(
                context,
                f"Dependents must be under {ADULT_AGE}. Users {ADULT_AGE} or over "
                "should register independently.",
            ),
            error_code="DEPENDENT_TOO_OLD",
        )


class DuplicateEmailError(ConflictError):
    def __init__(self, email: str, context: str = ""):
        super().__init__(
            _prefixed(context, f"An account with email {email} already exists."),
            error_code="DUPLICATE_EMAIL",
        )


class DuplicateDependentError(ConflictError):
    """Same guardian already has a dependent with this name and date of birth."""

    def __init__(self, first_name: str, last_name: str, context: str = ""):
        super().__init__(
            _prefixed(
                context,
                f"A dependent named {first_name} {last_name} with the same date of "
                "birth already exists for this guardian.",
            ),
            error_code="DUPLICATE_DEPENDENT",
        )


class ImmutableFieldError(BadRequestError):
    def __init__(self, field_name: str, context: str = ""):
        super().__init__(
            _prefixed(context, f"{field_name} cannot be changed."),
            error_code="IMMUTABLE_FIELD",
        )


class UserNotFoundError(NotFoundError):
    def __init__(self, context: str = ""):
        super().__init__(_prefixed(context, "User not found."), error_code="USER_NOT_FOUND")


class NotYourDependentError(ForbiddenError):
    def __init__(self, context: str = ""):
        super().__init__(
            _prefixed(context, "This account is not one of your dependents."),
            error_code="NOT_YOUR_DEPENDENT",
        )


class InvalidGuardianError(BadRequestError):
    def __init__(self, message: str = "Dependents can only be added to a parent account."):
        super().__init__(message, error_code="INVALID_GUARDIAN")


class SelfDeactivationError(BadRequestError):
    def __init__(self):
        super().__init__("You cannot deactivate your own account.", error_code="SELF_DEACTIVATION")
