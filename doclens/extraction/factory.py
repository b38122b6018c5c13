from doclens.config.settings import Settings
from doclens.extraction.text_extractor import TextExtractor
from doclens.ocr.tesseract_adapter import TesseractOcrEngine
from doclens.pdf.factory import PdfExtractorFactory


def build_text_extractor(settings: Settings) -> TextExtractor:
    """Build the extractor with the configured PDF engine and Tesseract OCR."""
    timeout = settings.extraction_timeout_seconds
    return TextExtractor(
        pdf_extractor=PdfExtractorFactory.create(settings.pdf_engine),
        ocr_engine=TesseractOcrEngine(
            language=settings.ocr_language,
            tesseract_cmd=settings.tesseract_cmd,
            timeout_seconds=max(timeout, 0),
        ),
        timeout_seconds=timeout if timeout > 0 else None,
    )
