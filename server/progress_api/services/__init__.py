"""Service collaborators for the progress API."""
from .narrative import (
    NarrativeGenerator,
    NullNarrativeGenerator,
    GatewayNarrativeGenerator,
    get_narrative_generator,
)

__all__ = [
    "NarrativeGenerator",
    "NullNarrativeGenerator",
    "GatewayNarrativeGenerator",
    "get_narrative_generator",
]
