class TraceSimError(Exception):
    """Base class for simulator errors."""


class ConfigError(TraceSimError):
    """Cache parameters that the address arithmetic cannot work with."""


class TraceFormatError(TraceSimError):
    """A trace line that does not match `<marker> <kind> <address> <icount>`."""

    def __init__(self, message, line_number=None, text=None):
        self.line_number = line_number
        self.text = text
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
