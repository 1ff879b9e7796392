"""Exceptions raised by fly_motion."""


class FlyMotionError(Exception):
    """Base class for errors raised while launching a flight."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"{type(self).__name__}: {self.message}"


class OriginNotFound(FlyMotionError):
    """The origin element is not mounted."""

    def __init__(self, message: str = 'Origin element not found'):
        super().__init__(message)


class DestinationNotFound(FlyMotionError):
    """The destination element is not mounted."""

    def __init__(self, message: str = 'Destination element not found'):
        super().__init__(message)
