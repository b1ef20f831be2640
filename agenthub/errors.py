"""Exception hierarchy for AgentHub"""


class AgentHubError(Exception):
    """Base class for all AgentHub errors"""


class ConfigurationError(AgentHubError):
    """Required configuration is missing or invalid. Fatal at startup."""


class EmbeddingDimensionError(AgentHubError):
    """An embedding vector does not have the configured dimension"""

    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"Embedding has {actual} dimensions, expected {expected}")


class AmbiguousGoogleIntegrationError(AgentHubError, ValueError):
    """An agent update would leave it with both Google integration sources, or neither"""


class MigrationError(AgentHubError):
    """A migration step failed"""
