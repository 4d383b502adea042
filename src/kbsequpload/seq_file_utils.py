"""Validation of local sequence file names before upload."""

import os
import re

from .errors import InvalidFileError, UnrecognizedFileTypeError
from .library_types import Handle

COMPRESSION_SUFFIXES = ["gz", "gzip", "bzip", "bzip2", "bz", "bz2", "zip"]
ARCHIVE_SUFFIX = "tar"
SEQUENCE_EXTENSIONS = ["fasta", "fastq", "fas", "fa", "fq", "fna", "bas.h5", "bax.h5"]

_COMPRESSION_RE = re.compile(r"\.(" + "|".join(COMPRESSION_SUFFIXES) + r")$")
_ARCHIVE_RE = re.compile(r"\." + ARCHIVE_SUFFIX + r"$")
_SEQUENCE_RE = re.compile(
    r"\.(" + "|".join(re.escape(ext) for ext in SEQUENCE_EXTENSIONS) + r")$"
)


def logical_file_name(name: str) -> str:
    """Strip one compression suffix and then one .tar suffix from name.

    >>> logical_file_name("reads.fastq.gz")
    'reads.fastq'
    >>> logical_file_name("ref.fa.tar.bz2")
    'ref.fa'
    """
    name = _COMPRESSION_RE.sub("", name)
    return _ARCHIVE_RE.sub("", name)


def is_sequence_file_name(name: str) -> bool:
    """True if name, once decompressed and unarchived, is a known read or contig format."""
    return _SEQUENCE_RE.search(logical_file_name(name)) is not None


def validate_seq_file(path) -> Handle:
    """Check a local sequence file and return a placeholder handle for it.

    Args:
        path: Path to a FASTA, FASTQ or PacBio h5 file, optionally
            compressed and/or tarred

    Returns:
        Handle holding the absolute path and the original basename

    Raises:
        InvalidFileError: path is empty, missing or refers to an empty file
        UnrecognizedFileTypeError: the extension is not a sequence format
    """
    if not path or not os.path.isfile(path) or os.path.getsize(path) == 0:
        raise InvalidFileError(f"Invalid file: {path}")
    path = str(path)
    if not is_sequence_file_name(path):
        raise UnrecognizedFileTypeError(f"Unrecognized file type: {path}")
    return Handle(
        file_name=os.path.basename(path),
        full_path_file=os.path.abspath(path),
    )
