import cachegrid


class CacheGridError(Exception):
    """Base class for all cachegrid-specific exceptions.
    It automatically appends the package version to help with debugging reports.
    """

    def __init__(self, message: str):
        self.cachegrid_version = getattr(cachegrid, "__version__", "unknown")
        # Store the original message cleanly for programmatic access
        self.original_message = message
        full_message = f"[cachegrid {self.cachegrid_version}] {message}"
        super().__init__(full_message)


# Configuration Errors
class ConfigurationError(CacheGridError):
    """Raised when world, registry or filter parameters are invalid."""

    def __init__(self, param_name: str = None, reason: str = None):
        # Allow flexible usage: raise ConfigurationError("Generic message")
        # OR: raise ConfigurationError("radius", "must be positive")
        if param_name and reason:
            message = f"Invalid configuration for '{param_name}': {reason}"
            self.param_name = param_name
        else:
            message = param_name if param_name else "Invalid configuration"
            self.param_name = None

        super().__init__(message)


class ScenarioLockedError(ConfigurationError):
    """Raised when a scenario is mutated after it has been bound to a running world."""

    def __init__(self, key):
        self.key = key
        super().__init__(key, "scenario cannot be mutated while the world is running")


# Persistence Errors
class PersistenceError(CacheGridError):
    """Raised by a state store when the agent state cannot be written."""

    def __init__(self, location, reason):
        self.location = location
        self.reason = reason
        message = f"Could not save agent state to {location}: {reason}"
        super().__init__(message)
