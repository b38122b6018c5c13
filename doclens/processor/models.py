from dataclasses import dataclass


@dataclass(frozen=True)
class UploadedFileMeta:
    """Metadata of a stored upload, as handed over by the upload layer."""

    file_name: str
    original_name: str
    mime_type: str
    file_size: int
    file_path: str
