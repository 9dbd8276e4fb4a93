"""Error taxonomy shared by services, the auth guard, and the API layer.

Services raise these; exception handlers registered in main.py render
every one of them as `{"error": message}` with the class's status code.
None of them are retried.
"""


class TeamHubError(Exception):
    """Base class. `status_code` is the HTTP status the API responds with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(TeamHubError):
    """Missing or out-of-range input."""

    status_code = 400


class Unauthenticated(TeamHubError):
    """No session token on the request, or a login that did not match."""

    status_code = 401


class InvalidCredentials(TeamHubError):
    """A session token was presented but failed verification."""

    status_code = 403


class Forbidden(TeamHubError):
    """Authenticated, but the role or ownership rule does not allow it."""

    status_code = 403


class NotFound(TeamHubError):
    status_code = 404


class Conflict(TeamHubError):
    """Duplicate email, already approved, already accepted.

    Reported as 400.
    """

    status_code = 400


class DuplicateKey(Conflict):
    """A unique constraint in the store rejected an insert."""


class StoreError(TeamHubError):
    """The database failed underneath us."""

    status_code = 500
