"""
statsdlite - exception classes

"""


class StatsdError(Exception):
    """Generic statsdlite exception"""


class ConfigurationError(StatsdError, ValueError):
    """Invalid client configuration"""


class ValidationError(StatsdError, ValueError):
    """Metric value or sample rate outside the domain of its metric kind"""


class TransportError(StatsdError):
    """Socket construction or send failure"""


class OversizeDataError(StatsdError):
    """A single encoded metric line does not fit in the buffer"""


class OversizeDataWarning(UserWarning):
    """A single encoded metric line did not fit in the buffer and was dropped"""
