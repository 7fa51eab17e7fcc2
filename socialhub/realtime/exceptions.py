from socketio.exceptions import ConnectionRefusedError as SocketConnectionRefusedError


class Unauthorized(SocketConnectionRefusedError):  # noqa: N818
    """Handshake refused: missing or invalid credential.

    Raised from the ``connect`` handler; python-socketio turns it into a
    rejected connection whose error message is ``"Unauthorized"``.
    """

    def __init__(self, *args):
        super().__init__(*(args or ("Unauthorized",)))


class ValidationDropped(Exception):  # noqa: N818
    """Malformed inbound event. Handlers ignore it without replying."""


class PersistenceFailure(Exception):
    """A durable write failed; the triggering operation must not deliver."""


class RecipientNotFound(PersistenceFailure):
    """The target user does not exist."""
