from __future__ import annotations


class DomainError(Exception):
    """Base for domain errors."""


class ValidationError(DomainError):
    """Input is malformed or violates a business rule."""


class AuthenticationError(DomainError):
    """Credentials or token could not be accepted."""


class AuthorizationError(DomainError):
    """Identity is known but not allowed to proceed."""


class NotFoundError(DomainError):
    """Requested record does not exist."""


class ConflictError(DomainError):
    """Write would break a uniqueness rule."""


class InternalError(DomainError):
    """Unexpected failure in a collaborator."""


class PasswordMismatchError(ValidationError):
    """New password and its confirmation differ."""


class InvalidSubscriptionError(ValidationError):
    """Subscription tier is not recognized."""


class AlreadyVerifiedError(ValidationError):
    """Account email is already verified."""


class ContactInputError(ValidationError):
    """Contact payload or listing parameters are invalid."""


class AvatarInputError(ValidationError):
    """Uploaded avatar cannot be processed."""


class InvalidCredentialsError(AuthenticationError):
    """Email or password is wrong."""


class EmailNotVerifiedError(AuthenticationError):
    """Account exists but its email is not verified."""


class MissingTokenError(AuthenticationError):
    """No bearer token on the request."""


class InvalidTokenError(AuthenticationError):
    """Token failed verification."""


class TokenSignatureError(InvalidTokenError):
    """Token is malformed or signed with another key."""


class TokenExpiredError(InvalidTokenError):
    """Token lifetime has passed."""


class TokenPurposeError(InvalidTokenError):
    """Token was minted for another purpose."""


class RefreshSessionInvalidError(AuthenticationError):
    """Refresh token does not match a live session."""


class NoSessionError(AuthorizationError):
    """No live session holds the presented access token."""


class UnknownUserError(AuthorizationError):
    """Token subject no longer maps to an account."""


class ContactAccessDeniedError(AuthorizationError):
    """Contact belongs to another user."""


class NoActiveSessionError(NotFoundError):
    """Logout requested without a session."""


class VerificationTokenNotFoundError(NotFoundError):
    """Verification token is unknown or already consumed."""


class InvalidOrExpiredTokenError(NotFoundError):
    """Password reset token is unknown, consumed or expired."""


class ContactNotFoundError(NotFoundError):
    """Contact does not exist."""


class EmailAlreadyExistsError(ConflictError):
    """Email is already registered."""


class EmailDeliveryError(InternalError):
    """Email transport failed."""
