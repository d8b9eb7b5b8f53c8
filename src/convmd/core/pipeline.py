"""Core conversion pipeline.

``DocumentConverter`` runs one document at a time through a mapper:

1. Load the file
2. Split front matter from the body
3. Rewrite media references in the body
4. Classify the document's tags
5. Synthesize the output front matter and path
6. Write the output file

A failure at any stage ends that document's conversion. It is recorded on
the document's result and the batch moves on to the next file.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from convmd.exceptions import ConversionError, DocumentError, DocumentIOError
from convmd.mapper.base import Mapper, OutputDocument
from convmd.utils.fs import read_text, write_text
from convmd.utils.logging import file_context, get_logger

log = get_logger(__name__)


class ConversionStage(str, Enum):
    """Stages a document passes through, in order."""

    LOADED = "loaded"
    SPLIT = "split"
    REWRITTEN = "rewritten"
    CLASSIFIED = "classified"
    SYNTHESIZED = "synthesized"
    WRITTEN = "written"


@dataclass
class PipelineResult:
    """Result of converting one document."""

    input_path: Path
    output_path: Path | None = None
    stage: ConversionStage | None = None  # Last stage completed
    error: ConversionError | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BatchResult:
    """Results of a batch run, in processing order."""

    results: list[PipelineResult] = field(default_factory=list)

    @property
    def succeeded(self) -> list[PipelineResult]:
        return [r for r in self.results if r.success]

    @property
    def failed(self) -> list[PipelineResult]:
        return [r for r in self.results if not r.success]

    @property
    def total(self) -> int:
        return len(self.results)


class DocumentConverter:
    """Drive documents through a mapper and write the results."""

    def __init__(self, mapper: Mapper, dry_run: bool = False) -> None:
        self.mapper = mapper
        self.dry_run = dry_run

    def convert_file(self, input_path: Path, output_dir: Path) -> PipelineResult:
        """Convert a single document.

        ``output_dir`` must already exist.

        Args:
            input_path: Source document
            output_dir: Directory receiving the converted document

        Returns:
            PipelineResult; ``error`` is set when a stage failed
        """
        result = PipelineResult(input_path=input_path)
        stage = ConversionStage.LOADED

        with file_context(input_path):
            try:
                text = self._load(input_path)
                result.stage = stage

                stage = ConversionStage.SPLIT
                document = self.mapper.read(text, input_path.stem)
                result.stage = stage

                stage = ConversionStage.REWRITTEN
                body = self.mapper.rewrite(document)
                result.stage = stage

                stage = ConversionStage.CLASSIFIED
                categories = self.mapper.classify(document)
                result.stage = stage

                stage = ConversionStage.SYNTHESIZED
                output = self.mapper.synthesize(document, body, categories, output_dir)
                result.output_path = output.path
                result.stage = stage

                if self.dry_run:
                    log.info("Dry run, not writing", output=str(output.path))
                    return result

                stage = ConversionStage.WRITTEN
                self._write(output)
                result.stage = stage
                log.info("Document converted", output=str(output.path))

            except DocumentError as e:
                result.error = ConversionError(input_path, str(e), cause=e, stage=stage.value)
                log.error("Document conversion failed", stage=stage.value, error=str(e))
            except Exception as e:
                result.error = ConversionError(input_path, str(e), cause=e, stage=stage.value)
                log.exception("Unexpected error converting document", stage=stage.value)

        return result

    def convert_batch(
        self,
        input_paths: Iterable[Path],
        output_dir: Path,
        on_result: Callable[[PipelineResult], None] | None = None,
    ) -> BatchResult:
        """Convert documents one after another.

        A failed document never stops the batch.

        Args:
            input_paths: Source documents, processed in order
            output_dir: Directory receiving converted documents (must exist)
            on_result: Optional callback invoked after each document

        Returns:
            BatchResult with one PipelineResult per input
        """
        batch = BatchResult()

        for input_path in input_paths:
            result = self.convert_file(input_path, output_dir)
            batch.results.append(result)
            if on_result is not None:
                on_result(result)

        log.info(
            "Batch finished",
            mapping=self.mapper.name,
            total=batch.total,
            succeeded=len(batch.succeeded),
            failed=len(batch.failed),
        )
        return batch

    def _load(self, input_path: Path) -> str:
        try:
            return read_text(input_path)
        except (OSError, UnicodeDecodeError) as e:
            raise DocumentIOError(input_path, e) from e

    def _write(self, output: OutputDocument) -> None:
        try:
            write_text(output.path, output.render())
        except OSError as e:
            raise DocumentIOError(output.path, e) from e
