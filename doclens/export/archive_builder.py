import io
import os
import zipfile
from dataclasses import dataclass

from doclens.database.models import DocumentDetails
from doclens.export.report_builder import ReportBuilder
from doclens.storage.file_storage import safe_file_name

# Fixed entry timestamp so identical inputs give identical archives.
_ENTRY_DATE_TIME = (1980, 1, 1, 0, 0, 0)


@dataclass(frozen=True)
class ExportBundle:
    archive_bytes: bytes
    filename: str


def base_name(file_name: str) -> str:
    """File name without its last extension."""
    return os.path.splitext(file_name)[0]


class ArchiveBuilder:
    """Zips the original file together with the generated report."""

    def __init__(self, report_builder: ReportBuilder | None = None) -> None:
        self._report_builder = report_builder or ReportBuilder()

    def build(self, details: DocumentDetails, file_bytes: bytes) -> ExportBundle:
        original_name = safe_file_name(details.document.original_name)
        stem = base_name(original_name)
        report = self._report_builder.build(details)

        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED, compresslevel=9) as zf:
            self._add_entry(zf, original_name, file_bytes)
            self._add_entry(zf, f"{stem}_extracted_data.txt", report.encode("utf-8"))

        return ExportBundle(
            archive_bytes=buffer.getvalue(),
            filename=f"{stem}_with_extracted_data.zip",
        )

    @staticmethod
    def _add_entry(zf: zipfile.ZipFile, name: str, data: bytes) -> None:
        info = zipfile.ZipInfo(name, date_time=_ENTRY_DATE_TIME)
        info.compress_type = zipfile.ZIP_DEFLATED
        info.external_attr = 0o644 << 16
        zf.writestr(info, data, compresslevel=9)
