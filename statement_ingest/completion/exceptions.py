class CompletionError(Exception):
    """Raised when the hosted text-completion service cannot be used."""


class CompletionNetworkError(CompletionError):
    """Raised when the provider call fails due to network/infrastructure issues."""


class AIResponseMalformed(CompletionError):
    """Raised when a completion does not contain the JSON the prompt asked for."""
