import asyncio
import time

from doclens.extraction.base import BaseTextExtractor
from doclens.extraction.exceptions import ExtractionError
from doclens.extraction.models import ExtractionOutcome, FileKind, resolve_file_kind
from doclens.logging.logger import Log
from doclens.ocr.base import BaseOcrEngine
from doclens.pdf.base import BasePdfExtractor

PDF_CONFIDENCE = 100.0


class TextExtractor(BaseTextExtractor):
    """Dispatches PDFs to the text-layer parser and images to OCR.

    Engine calls are blocking, so they run in a worker thread. Engines that
    can enforce ``timeout_seconds`` themselves (Tesseract) are expected to;
    ``grace_seconds`` later the extractor gives up on the call, waits for the
    thread to finish and raises ``ExtractionError``.
    """

    def __init__(
        self,
        *,
        pdf_extractor: BasePdfExtractor,
        ocr_engine: BaseOcrEngine,
        timeout_seconds: float | None = None,
        grace_seconds: float = 5.0,
    ) -> None:
        self._pdf_extractor = pdf_extractor
        self._ocr_engine = ocr_engine
        self._timeout_seconds = timeout_seconds
        self._grace_seconds = grace_seconds

    async def extract(
        self, file_bytes: bytes, mime_type: str, file_name: str = ""
    ) -> ExtractionOutcome:
        kind = resolve_file_kind(mime_type, file_name)
        started = time.perf_counter()
        if kind is FileKind.PDF:
            engine = self._pdf_extractor.name
            text = await self._run(self._pdf_extractor.extract, file_bytes)
            confidence = PDF_CONFIDENCE
        else:
            engine = self._ocr_engine.name
            result = await self._run(self._ocr_engine.recognize, file_bytes)
            text = result.text.strip()
            confidence = result.confidence
        elapsed_ms = int((time.perf_counter() - started) * 1000)
        Log.info(
            f"Extracted {len(text)} chars from {kind.value} in {elapsed_ms} ms "
            f"(confidence {confidence:.2f})",
            engine=engine,
        )
        return ExtractionOutcome(
            text=text,
            confidence=confidence,
            processing_time_ms=elapsed_ms,
        )

    async def _run(self, func, file_bytes: bytes):  # type: ignore[no-untyped-def]
        job = asyncio.ensure_future(asyncio.to_thread(func, file_bytes))
        limit = None
        if self._timeout_seconds is not None:
            limit = self._timeout_seconds + self._grace_seconds
        try:
            return await asyncio.wait_for(asyncio.shield(job), timeout=limit)
        except TimeoutError as exc:
            # Threads cannot be interrupted. The engine must have returned
            # before this run is reported as failed.
            Log.warning(
                f"Text extraction exceeded {self._timeout_seconds} seconds, "
                "waiting for the engine to stop"
            )
            await asyncio.gather(job, return_exceptions=True)
            raise ExtractionError(
                f"Text extraction timed out after {self._timeout_seconds} seconds"
            ) from exc
