"""Contains exceptions raised when reconciling application configuration."""


class RequiredConfigurationElementError(Exception):
    """Raised when a required configuration element is missing."""

    def __init__(self, name: str, cli_name: str, env_name: str) -> None:
        """Initializes the exception with the name of the missing element."""
        super().__init__(f"Missing required configuration element: {name} (command line option {cli_name}, environment variable {env_name})")
        self.name = name
        self.cli_name = cli_name
        self.env_name = env_name


class InvalidConfigurationElementError(Exception):
    """Raised when a configuration element has an unsupported value."""

    def __init__(self, name: str, value: str, allowed: list[str]) -> None:
        """Initializes the exception with the offending value and the allowed values."""
        super().__init__(f"Invalid value {value!r} for {name}; expected one of: {', '.join(allowed)}")
        self.name = name
        self.value = value
        self.allowed = allowed
