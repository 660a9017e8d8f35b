from upload_analyzer.input.uploaded_file import UploadedFile
from upload_analyzer.standards.analysis_thresholds import MAX_FILE_SIZE
from upload_analyzer.utils.exceptions import FileTooLargeError, UnsupportedFormatError


class FormatDetector:
    """
    Detects the upload format from the file extension,
    falling back to the declared media type.
    """

    SUPPORTED_FORMATS = {
        "csv": "CSV",
        "xlsx": "XLSX",
        "xls": "XLS",
    }

    SUPPORTED_MEDIA_TYPES = {
        "text/csv": "CSV",
        "application/csv": "CSV",
        "application/vnd.ms-excel": "XLS",
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet": "XLSX",
    }

    def __init__(self, upload: UploadedFile, max_file_size: int = MAX_FILE_SIZE):
        self.upload = upload
        self.max_file_size = max_file_size

    def detect(self) -> str:
        """
        Detect upload format.

        Returns:
            str: Detected format (e.g., 'CSV')

        Raises:
            UnsupportedFormatError: If format is unsupported
            FileTooLargeError: If the upload exceeds max_file_size
        """
        if self.upload is None:
            raise UnsupportedFormatError("No file provided")

        if self.max_file_size and self.upload.size > self.max_file_size:
            raise FileTooLargeError(
                f"File too large: {self.upload.size} bytes "
                f"(maximum {self.max_file_size} bytes)"
            )

        ext = self.upload.extension
        if ext in self.SUPPORTED_FORMATS:
            return self.SUPPORTED_FORMATS[ext]

        media_type = (self.upload.content_type or "").split(";")[0].strip().lower()
        if not ext and media_type in self.SUPPORTED_MEDIA_TYPES:
            return self.SUPPORTED_MEDIA_TYPES[media_type]

        raise UnsupportedFormatError(
            f"Unsupported file format: {ext or media_type or 'unknown'}. "
            f"Supported formats: {list(self.SUPPORTED_FORMATS.keys())}"
        )
