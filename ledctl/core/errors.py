"""Domain-specific errors for ledctl."""


class LedctlError(Exception):
    """Base error for ledctl."""


class RequestValidationError(LedctlError):
    """Base error for LED requests rejected before anything is written."""


class InvalidColorError(RequestValidationError):
    """Raised when a color spec is neither a palette name nor a valid r,g,b triple."""


class InvalidIntervalError(RequestValidationError):
    """Raised when a blink/rainbow interval is outside the accepted range."""


class InvalidBrightnessError(RequestValidationError):
    """Raised when a brightness value is outside 0-100."""


class NoActionSpecifiedError(RequestValidationError):
    """Raised when a request selects no LED action."""


class InvalidCombinationError(RequestValidationError):
    """Raised when request flags cannot be combined (e.g. second color without blink)."""


class BoardLoadError(LedctlError):
    """Raised when reading board definition files fails."""


class BoardValidationError(LedctlError):
    """Raised when a board file does not conform to schema or semantics."""


class BoardSelectionError(LedctlError):
    """Raised when a board or sketch cannot be resolved."""


class ConfigError(LedctlError):
    """Raised when environment configuration is malformed."""


class PortResolutionError(ConfigError):
    """Raised when no serial port was given on the command line or environment."""


class RegistryError(LedctlError):
    """Raised when an LED number/port mapping is invalid or conflicting."""


class ToolchainError(LedctlError):
    """Raised when arduino-cli cannot be run or exits with an error."""


class TransportError(LedctlError):
    """Base transport error."""


class NotConnectedError(TransportError):
    """Raised when a command is sent on a channel that is not open."""


class CommandInFlightError(TransportError):
    """Raised when a second command is sent before the first one resolved."""


class SerialConnectError(TransportError):
    """Raised when the serial port cannot be opened."""


class SerialWriteError(TransportError):
    """Raised when writing a command to the serial port fails."""


class SerialReadError(TransportError):
    """Raised when reading a reply from the serial port fails."""
