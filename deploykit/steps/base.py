"""Base class for deployment steps."""

from abc import ABC, abstractmethod
from typing import Any

from deploykit.models.deployment import DeploymentRequest
from deploykit.utils.logging import get_logger


class BaseStep(ABC):
    """A unit of work the orchestrator runs as one phase.

    Subclasses implement:
    - name: Phase identifier
    - description: What the step does
    - execute(): Run against a deployment request, returning phase metadata
    """

    def __init__(self):
        self.logger = get_logger(f"step.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Step name/identifier."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this step does."""
        pass

    @abstractmethod
    def execute(self, request: DeploymentRequest) -> dict[str, Any]:
        """Run the step.

        Args:
            request: The deployment being carried out

        Returns:
            Metadata recorded on the phase
        """
        pass
