"""Base class for external tool adapters."""

from abc import ABC, abstractmethod
from typing import Any, Dict


class ToolAdapter(ABC):
    """
    Base class for tool adapters.

    Tool adapters give opsynth a standardized interface to external tools
    (the OpenAPI code generator). Each adapter handles validation and
    execution for its specific tool.
    """

    @abstractmethod
    def validate(self) -> Dict[str, Any]:
        """
        Validate the tool's setup.

        Returns:
            Dictionary with keys:
                - 'valid': bool indicating if validation passed
                - 'errors': list of error messages (empty if valid)
                - 'warnings': list of warning messages (optional)
        """
        pass

    @abstractmethod
    def execute(self, *args, **kwargs) -> Any:
        """
        Execute a tool command.

        Returns:
            Tool-specific return value (typically subprocess.CompletedProcess)

        Raises:
            GenerationError: If command execution fails
        """
        pass
