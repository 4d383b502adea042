"""KBSeqUpload - upload sequence files to Shock and describe them as KBaseAssembly objects."""

from .base_utils import BaseUtils
from .errors import (
    ConverterOutputMissingError,
    ConverterProcessFailedError,
    InvalidArguments,
    InvalidFileError,
    MultiArchiveUnsupportedError,
    OutputWriteFailedError,
    RegistrationFailedError,
    SeqUploadError,
    UnknownLibraryTypeError,
    UnrecognizedFileTypeError,
    UploadConnectionFailedError,
    UploadEmptyResponseError,
    UploadRejectedError,
)
from .handle_service_utils import HandleServiceUtils
from .kb_library_utils import KBLibraryUtils
from .library_types import Handle, LibraryRecord, LibraryType
from .seq_file_utils import validate_seq_file
from .shared_env_utils import SharedEnvUtils
from .shock_utils import ShockConnection, ShockUtils
from .sra_convert_utils import SRAConvertUtils

__all__ = [
    "BaseUtils",
    "ConverterOutputMissingError",
    "ConverterProcessFailedError",
    "Handle",
    "HandleServiceUtils",
    "InvalidArguments",
    "InvalidFileError",
    "KBLibraryUtils",
    "LibraryRecord",
    "LibraryType",
    "MultiArchiveUnsupportedError",
    "OutputWriteFailedError",
    "RegistrationFailedError",
    "SRAConvertUtils",
    "SeqUploadError",
    "SharedEnvUtils",
    "ShockConnection",
    "ShockUtils",
    "UnknownLibraryTypeError",
    "UnrecognizedFileTypeError",
    "UploadConnectionFailedError",
    "UploadEmptyResponseError",
    "UploadRejectedError",
    "validate_seq_file",
]

__version__ = "0.1.0"
