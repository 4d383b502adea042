"""Exceptions raised while validating, converting and uploading sequence files."""

from typing import Optional


class SeqUploadError(Exception):
    """Base class for every failure that aborts an upload run."""


class InvalidArguments(SeqUploadError):
    """Missing or inconsistent arguments, e.g. a wrong number of input files."""


class InvalidFileError(SeqUploadError):
    """The input path is missing, does not exist, or is empty."""


class UnrecognizedFileTypeError(SeqUploadError):
    """The input name does not end in a known sequence file extension."""


class MultiArchiveUnsupportedError(SeqUploadError):
    """More than one SRA archive was given for paired-end conversion."""


class ConverterProcessFailedError(SeqUploadError):
    """The SRA converter could not be started or was killed by a signal."""


class ConverterOutputMissingError(SeqUploadError):
    """The SRA converter finished but an expected FASTQ file is not on disk."""


class UploadConnectionFailedError(SeqUploadError):
    """The Shock upload request could not be issued."""


class UploadEmptyResponseError(SeqUploadError):
    """Shock answered the upload request with an empty body."""


class UploadRejectedError(SeqUploadError):
    """Shock answered the upload request with a non-success status."""

    def __init__(self, file_name: str, status: Optional[int], message: str = "") -> None:
        self.file_name = file_name
        self.status = status
        self.message = message
        super().__init__(f"Error uploading file: {file_name}\n{status} {message}")


class RegistrationFailedError(SeqUploadError):
    """The handle service refused or failed to persist a handle."""


class UnknownLibraryTypeError(SeqUploadError):
    """The requested output type is not a known KBaseAssembly library type."""


class OutputWriteFailedError(SeqUploadError):
    """The output JSON file could not be written."""
