class AnalysisError(Exception):
    """
    Base exception for all upload analysis errors
    """
    pass


class UnsupportedFormatError(AnalysisError):
    """
    Raised when the file extension / media type is not recognized
    """
    pass


class FileTooLargeError(AnalysisError):
    """
    Raised when the upload exceeds the configured size limit
    """
    pass


class EmptyFileError(AnalysisError):
    """
    Raised when a CSV file has no non-blank lines
    """
    pass


class EmptyWorkbookError(AnalysisError):
    """
    Raised when a workbook contains no sheets
    """
    pass


class EmptySheetError(AnalysisError):
    """
    Raised when the first sheet of a workbook yields no rows
    """
    pass


class WorkbookReadError(AnalysisError):
    """
    Raised when the spreadsheet container cannot be opened
    """
    pass


class NoColumnsError(AnalysisError):
    """
    Raised when the header row yields no usable column names
    """
    pass


class MalformedRowError(AnalysisError):
    """
    Raised when a single CSV line cannot be tokenized (NUL byte).
    Data rows are skipped on this error; on the header it surfaces as NoColumnsError.
    """

    def __init__(self, message: str, line_number: int = None):
        super().__init__(message)
        self.line_number = line_number


class InvalidStatusTransitionError(AnalysisError):
    """
    Raised when a dataset status change is not allowed by the upload lifecycle
    """
    pass
