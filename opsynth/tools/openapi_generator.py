"""OpenAPI code generator tool adapter for opsynth."""

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional

from opsynth.errors import GenerationError
from opsynth.tools.base import ToolAdapter

logger = logging.getLogger(__name__)


class OpenApiGeneratorAdapter(ToolAdapter):
    """
    Adapter for openapi-generator-cli.

    Turns the synthesized document into a loadable client package:
        openapi-generator-cli generate -g python -i <document> -o <output_dir>
            --package-name <package_name>

    The output directory is cleaned before every run so stale operations
    from a previous generation never leak into the new surface.
    """

    def __init__(
        self,
        document_path: Path,
        output_dir: Path,
        package_name: str,
        generator_name: str = "python",
        command: str = "openapi-generator-cli",
    ):
        """
        Initialize OpenApiGeneratorAdapter.

        Args:
            document_path: Synthesized OpenAPI document
            output_dir: Directory the generator writes into
            package_name: Import name of the generated package
            generator_name: Generator target (-g)
            command: Generator executable
        """
        self.document_path = Path(document_path)
        self.output_dir = Path(output_dir)
        self.package_name = package_name
        self.generator_name = generator_name
        self.command = command

    def build_command(self) -> List[str]:
        """Build the generator command line."""
        return [
            self.command,
            "generate",
            "-g", self.generator_name,
            "-i", str(self.document_path.resolve()),
            "-o", str(self.output_dir),
            "--package-name", self.package_name,
        ]

    def validate(self) -> Dict[str, Any]:
        """
        Validate generator setup.

        Checks:
        - Generator executable is on PATH
        - Synthesized document exists
        """
        errors = []
        warnings = []

        if shutil.which(self.command) is None:
            errors.append(f"Generator executable not found on PATH: {self.command}")

        if not self.document_path.exists():
            errors.append(f"OpenAPI document not found: {self.document_path}")

        if self.output_dir.exists():
            warnings.append(f"Output directory will be cleaned: {self.output_dir}")

        return {"valid": len(errors) == 0, "errors": errors, "warnings": warnings}

    def clean_output(self) -> None:
        """Remove the output directory from a previous generation."""
        if self.output_dir.exists():
            logger.info(f"Cleaning output directory: {self.output_dir}")
            shutil.rmtree(self.output_dir)

    def execute(self, timeout: Optional[int] = None) -> subprocess.CompletedProcess:
        """
        Run the generator.

        Args:
            timeout: Optional timeout in seconds

        Returns:
            The completed process

        Raises:
            GenerationError: If the document is missing, the executable cannot
                             be started, or the generator exits non-zero
        """
        if not self.document_path.exists():
            raise GenerationError(f"OpenAPI document not found: {self.document_path}")

        self.clean_output()
        cmd = self.build_command()
        logger.info(f"Running generator: {' '.join(cmd)}")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GenerationError(f"Failed to generate API client: {e}") from e

        if result.returncode != 0:
            stderr = (result.stderr or result.stdout or "").strip()
            logger.error(f"Generator failed ({result.returncode}): {stderr}")
            raise GenerationError(
                f"Failed to generate API client: {stderr}",
                returncode=result.returncode,
            )

        logger.info(f"Generated client package {self.package_name} into {self.output_dir}")
        return result
