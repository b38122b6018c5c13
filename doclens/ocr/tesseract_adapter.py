import io
from typing import Any

import pytesseract
from PIL import Image

from doclens.extraction.exceptions import ExtractionError
from doclens.ocr.base import BaseOcrEngine, OcrResult


class TesseractOcrEngine(BaseOcrEngine):
    """OCR over image bytes with Tesseract via pytesseract.

    ``timeout_seconds`` is handed to pytesseract, which kills the tesseract
    subprocess when it runs over. 0 means no limit.
    """

    name = "tesseract"

    def __init__(
        self, language: str = "eng", tesseract_cmd: str = "", timeout_seconds: float = 0
    ) -> None:
        self._language = language
        self._timeout_seconds = timeout_seconds
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image_bytes: bytes) -> OcrResult:
        try:
            with Image.open(io.BytesIO(image_bytes)) as image:
                image.load()
                data = pytesseract.image_to_data(
                    image,
                    lang=self._language,
                    output_type=pytesseract.Output.DICT,
                    timeout=self._timeout_seconds,
                )
        except RuntimeError as exc:
            if "timeout" in str(exc).lower():
                raise ExtractionError(
                    f"OCR timed out after {self._timeout_seconds} seconds"
                ) from exc
            raise ExtractionError(f"OCR processing failed: {exc}") from exc
        except Exception as exc:
            raise ExtractionError(f"OCR processing failed: {exc}") from exc
        return OcrResult(text=_join_words(data), confidence=_mean_confidence(data))


def _join_words(data: dict[str, list[Any]]) -> str:
    """Rebuild text from word boxes: words joined by spaces, one line per Tesseract line."""
    lines: dict[tuple[int, int, int], list[str]] = {}
    for i, word in enumerate(data.get("text", [])):
        word = str(word).strip()
        if not word:
            continue
        key = (
            int(data["block_num"][i]),
            int(data["par_num"][i]),
            int(data["line_num"][i]),
        )
        lines.setdefault(key, []).append(word)
    return "\n".join(" ".join(words) for words in lines.values()).strip()


def _mean_confidence(data: dict[str, list[Any]]) -> float:
    scores: list[float] = []
    for word, conf in zip(data.get("text", []), data.get("conf", []), strict=False):
        try:
            score = float(conf)
        except (TypeError, ValueError):
            continue
        if score >= 0 and str(word).strip():
            scores.append(score)
    if not scores:
        return 0.0
    return max(0.0, min(100.0, sum(scores) / len(scores)))
