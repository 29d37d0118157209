"""Exception hierarchy for memeagent."""


class MemeAgentError(Exception):
    """Base error for the agent."""


class ConfigurationError(MemeAgentError):
    """Settings could not be loaded or validated. Fatal at startup."""


class CredentialError(ConfigurationError):
    """A credential or wallet key could not be loaded. Fatal at startup."""


class BudgetExhaustedError(MemeAgentError):
    """An operation was recorded after the daily budget was used up."""


class ExecutionError(MemeAgentError):
    """The execution venue could not carry out a swap."""
