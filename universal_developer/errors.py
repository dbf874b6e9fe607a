"""
Exceptions raised by the universal_developer pipeline
"""


class UniversalDeveloperError(Exception):
    """Base class for all universal_developer errors"""

    pass


class UnsupportedProviderError(UniversalDeveloperError, ValueError):
    """Provider identifier has no adapter"""

    def __init__(self, provider: str):
        self.provider = provider
        super().__init__(f"Unsupported provider: {provider}")


class ProviderError(UniversalDeveloperError):
    """
    Upstream call failed: network error, non-success status or a response
    body that could not be read.
    """

    def __init__(self, provider: str, message: str):
        self.provider = provider
        self.message = message
        super().__init__(f"Failed to execute {provider} prompt: {message}")
