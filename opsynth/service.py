"""
OperationService - host-facing facade over synthesis, generation and dispatch.

Operations:
- synthesize: descriptor -> document written to the well-known path
- generate: synthesize, run the external generator, rebuild the catalog
- execute: invoke the operation a descriptor names (building the catalog
  on first use)
- operations: names in the current catalog
"""

import logging
from pathlib import Path
from typing import Any, Optional

from opsynth.config import OpsynthConfig
from opsynth.engine import DispatchEngine, EngineStatus
from opsynth.errors import GenerationError, ValidationError
from opsynth.schemas import RequestDescriptor
from opsynth.surface import SupportsLoad, SurfaceLoader
from opsynth.synthesis import synthesize, write_document
from opsynth.tools import OpenApiGeneratorAdapter

logger = logging.getLogger(__name__)


class OperationService:
    """
    Wires the synthesizer, generator adapter and DispatchEngine together.

    Usage:
        service = OperationService.from_config(load_config())
        service.generate(descriptor)
        result = service.execute(descriptor)
    """

    def __init__(
        self,
        document_path: Path,
        engine: DispatchEngine,
        generator: Optional[OpenApiGeneratorAdapter] = None,
    ):
        self.document_path = Path(document_path)
        self.engine = engine
        self.generator = generator

    @classmethod
    def from_config(
        cls,
        config: OpsynthConfig,
        loader: Optional[SupportsLoad] = None,
    ) -> "OperationService":
        """Build a service from configuration."""
        if loader is None:
            loader = SurfaceLoader(
                config.package_name,
                search_dir=config.output_path,
                api_class=config.api_class,
            )
        generator = OpenApiGeneratorAdapter(
            document_path=config.document_file,
            output_dir=config.output_path,
            package_name=config.package_name,
            generator_name=config.generator_name,
            command=config.generator_command,
        )
        return cls(config.document_file, DispatchEngine(loader), generator)

    def synthesize(self, descriptor: RequestDescriptor) -> Path:
        """
        Synthesize the document and write it to the well-known path.

        Raises:
            ValidationError: Before anything is written
        """
        text = synthesize(descriptor)
        return write_document(text, self.document_path)

    def generate(self, descriptor: RequestDescriptor) -> Path:
        """
        Synthesize, run the generator and rebuild the catalog.

        Returns:
            Path of the written document

        Raises:
            ValidationError: If the descriptor is malformed
            GenerationError: If the generator is unavailable or fails
            SurfaceNotFound: If the generated package cannot be loaded
        """
        path = self.synthesize(descriptor)
        if self.generator is not None:
            self._check_generator()
            self.generator.execute()
        self.engine.build_catalog()
        logger.info(f"Generation complete for operation: {descriptor.operation_id}")
        return path

    def _check_generator(self) -> None:
        report = self.generator.validate()
        for warning in report.get("warnings", []):
            logger.warning(warning)
        if not report["valid"]:
            raise GenerationError(
                f"Failed to generate API client: {'; '.join(report['errors'])}"
            )

    def execute(self, descriptor: RequestDescriptor) -> Any:
        """
        Invoke the operation named by the descriptor.

        Raises:
            ValidationError: If operationId is missing
            SurfaceNotFound: If the generated package cannot be loaded
            OperationNotFound: If the operation id resolves to nothing
            InvocationFailed: If the call raises
        """
        if not descriptor.operation_id:
            raise ValidationError("operationId is required for execution")
        if self.engine.status != EngineStatus.READY:
            self.engine.build_catalog()
        return self.engine.invoke(descriptor)

    def operations(self) -> list[str]:
        """Catalog names, building the catalog if needed."""
        if self.engine.status != EngineStatus.READY:
            self.engine.build_catalog()
        return sorted(self.engine.state.catalog.names())
