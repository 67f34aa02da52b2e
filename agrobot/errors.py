"""Error taxonomy shared by the assistant core."""


class AgroBotError(Exception):
    """Base class for assistant errors."""


class InvalidInput(AgroBotError, ValueError):
    """Malformed caller input: bad yield parameters, unsupported plant type."""


class TransportError(AgroBotError):
    """A remote collaborator (Watson, Twilio) failed or is not configured."""


class TrainingPrecondition(AgroBotError):
    """Training cannot start: too few images, or a run is already going."""
