# errors.py


class RequestError(Exception):
    """Erreur terminale d'une requête ; `message` part tel quel au client."""

    message = "Request failed."

    def __init__(self, message: str | None = None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ParseError(RequestError):
    message = "Malformatted request."


class ValidationError(RequestError):
    message = "Malformatted request: no action keyword."


class UnknownActionError(RequestError):
    message = "Unrecognized action keyword."


class AuthError(RequestError):
    message = "Authorization failed."


class QueryError(RequestError):
    message = "Database error."


class TransportError(Exception):
    """Envoi impossible (client parti) : loggé puis ignoré."""
