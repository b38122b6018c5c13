"""Plain-text report of a document's extraction and AI interactions."""

from datetime import datetime

from doclens.database.models import (
    DocumentDetails,
    ExtractionResultRecord,
    InteractionRecord,
    InteractionType,
    ProcessingStatus,
)

RULE = "═" * 55
THIN_RULE = "─" * 55


def _heading(title: str) -> list[str]:
    return [RULE, title, RULE, ""]


def _timestamp(value: datetime | None) -> str:
    return value.isoformat() if value is not None else "N/A"


class ReportBuilder:
    """Renders the text report bundled next to the original file in downloads."""

    def build(self, details: DocumentDetails) -> str:
        lines = self._document_section(details)
        lines += self._extraction_section(details.extraction)
        lines += self._interactions_section(details.interactions)
        return "\n".join(lines)

    def _document_section(self, details: DocumentDetails) -> list[str]:
        document = details.document
        return [
            *_heading("DOCUMENT INFORMATION"),
            f"Document Name: {document.original_name}",
            f"File Size: {document.file_size / 1024:.2f} KB",
            f"File Type: {document.mime_type}",
            f"Uploaded: {_timestamp(document.created_at)}",
            f"Status: {document.upload_status.value}",
            "",
        ]

    def _extraction_section(self, extraction: ExtractionResultRecord | None) -> list[str]:
        if extraction is None:
            return []
        if extraction.status is ProcessingStatus.COMPLETED:
            lines = _heading("EXTRACTED TEXT")
            if extraction.confidence is not None:
                lines.append(f"Confidence: {extraction.confidence:.2f}%")
            if extraction.processing_time is not None:
                lines.append(f"Processing Time: {extraction.processing_time / 1000:.2f}s")
            else:
                lines.append("Processing Time: N/A")
            lines.append("")
            if extraction.summary:
                lines += [f"Summary: {extraction.summary}", ""]
            lines += [extraction.extracted_text, ""]
            return lines
        if extraction.status is ProcessingStatus.FAILED:
            lines = _heading("EXTRACTION STATUS: FAILED")
            if extraction.error:
                lines += [f"Error: {extraction.error}", ""]
            return lines
        return []

    def _interactions_section(self, interactions: list[InteractionRecord]) -> list[str]:
        if not interactions:
            return [
                *_heading("AI INTERACTIONS"),
                "No AI interactions yet.",
                "You can generate explanations or ask questions about this document.",
                "",
            ]
        lines = _heading(f"AI INTERACTIONS ({len(interactions)} total)")
        for index, interaction in enumerate(interactions, start=1):
            lines += [
                THIN_RULE,
                f"Interaction #{index} - {interaction.type.value}",
                THIN_RULE,
                f"Date: {_timestamp(interaction.created_at)}",
            ]
            if interaction.model:
                lines.append(f"Model: {interaction.model}")
            if interaction.tokens_used is not None:
                lines.append(f"Tokens Used: {interaction.tokens_used}")
            lines.append("")
            if interaction.type is InteractionType.QUERY:
                lines += ["QUESTION:", interaction.prompt, ""]
            lines += ["RESPONSE:", interaction.response, "", ""]
        return lines
