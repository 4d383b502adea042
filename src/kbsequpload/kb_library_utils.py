"""Assembly of KBaseAssembly library objects from local sequence files.

Each library type follows the same sequence: optional SRA conversion,
validation of every input file, upload to Shock, registration with the
handle service, and finally serialization of the record to JSON.
"""

from typing import Any, List, Optional, Sequence

from .errors import InvalidArguments, MultiArchiveUnsupportedError
from .handle_service_utils import HandleServiceUtils
from .library_types import Handle, LibraryRecord, LibraryType
from .seq_file_utils import validate_seq_file
from .shock_utils import ShockConnection, ShockUtils
from .sra_convert_utils import (
    DEFAULT_SRA_CONVERTER,
    MODE_PAIRED,
    MODE_SINGLE,
    SRAConvertUtils,
)


class KBLibraryUtils(ShockUtils, HandleServiceUtils, SRAConvertUtils):
    """Builds PairedEndLibrary, SingleEndLibrary and ReferenceAssembly records.

    Combines SRA conversion, Shock upload and handle registration with the
    shared environment for configuration and tokens.
    """

    def __init__(self, sra_converter: Optional[str] = None, **kwargs: Any) -> None:
        """Initialize the library utilities.

        Args:
            sra_converter: SRA converter program, falls back to the
                "sra.converter" config value and then fastq-dump
            **kwargs: Arguments for ShockUtils, HandleServiceUtils and
                SharedEnvUtils (shock_url, handle_service_url, token,
                config_file, log_level...)
        """
        super().__init__(sra_converter=sra_converter, **kwargs)
        if sra_converter is None:
            self.sra_converter = self.get_config_value(
                "sra.converter", DEFAULT_SRA_CONVERTER
            )

    def upload_and_register(
        self, handle: Handle, shock: Optional[ShockConnection] = None
    ) -> Handle:
        """Upload a placeholder handle to Shock and register it."""
        self.upload_handle(handle, shock)
        return self.persist_handle(handle)

    def _upload_handles(
        self, record: LibraryRecord, files: Sequence[str], shock: Optional[ShockConnection]
    ) -> LibraryRecord:
        # Validate everything before the first upload
        handles = [validate_seq_file(f) for f in files]
        if shock is None:
            shock = self.shock_connection()
        for field_name, handle in zip(record.library_type.handle_fields, handles):
            record.set_handle(field_name, self.upload_and_register(handle, shock))
        return record

    def _first_input(self, inputs: Sequence[str], library_type: LibraryType) -> str:
        if len(inputs) > 1:
            self.log_warning(
                f"{library_type.value} takes one input file, ignoring {', '.join(inputs[1:])}"
            )
        return inputs[0]

    def upload_pe_lib(
        self,
        inputs: Sequence[str],
        insert: Optional[float] = None,
        stdev: Optional[float] = None,
        outward: Optional[int] = None,
        convert_sra: bool = False,
        shock: Optional[ShockConnection] = None,
    ) -> LibraryRecord:
        """Upload one interleaved or two paired read files as a PairedEndLibrary.

        Args:
            inputs: One (interleaved) or two read files, or one SRA archive
            insert: Insert size mean
            stdev: Insert size standard deviation
            outward: Truthy if the reads in a pair point outward
            convert_sra: Split the single SRA input into _1/_2 FASTQ files first
            shock: Shock connection, defaults to the configured one

        Returns:
            The PairedEndLibrary record with uploaded handles
        """
        files = list(inputs)
        if convert_sra:
            if len(files) != 1:
                raise MultiArchiveUnsupportedError("No handling for multiple SRA files")
            files = self.convert_sra(files, MODE_PAIRED)

        record = LibraryRecord(LibraryType.PAIRED_END)
        if len(files) == 1:
            record.set_field("interleaved", 1)
        if insert is not None:
            record.set_field("insert_size_mean", insert)
        if stdev is not None:
            record.set_field("insert_size_std_dev", stdev)
        if outward:
            record.set_field("read_orientation_outward", 1)
        return self._upload_handles(record, files, shock)

    def upload_se_lib(
        self,
        inputs: Sequence[str],
        convert_sra: bool = False,
        shock: Optional[ShockConnection] = None,
    ) -> LibraryRecord:
        """Upload one read file (or SRA archive) as a SingleEndLibrary."""
        file = self._first_input(inputs, LibraryType.SINGLE_END)
        if convert_sra:
            (file,) = self.convert_sra([file], MODE_SINGLE)
        record = LibraryRecord(LibraryType.SINGLE_END)
        return self._upload_handles(record, [file], shock)

    def upload_ref(
        self,
        inputs: Sequence[str],
        refname: Optional[str] = None,
        shock: Optional[ShockConnection] = None,
    ) -> LibraryRecord:
        """Upload one contig FASTA file as a ReferenceAssembly."""
        file = self._first_input(inputs, LibraryType.REFERENCE)
        record = LibraryRecord(LibraryType.REFERENCE)
        if refname:
            record.set_field("reference_name", refname)
        return self._upload_handles(record, [file], shock)

    def upload_library(
        self,
        library_type: str,
        inputs: Sequence[str],
        insert: Optional[float] = None,
        stdev: Optional[float] = None,
        outward: Optional[int] = None,
        refname: Optional[str] = None,
        convert_sra: bool = False,
    ) -> LibraryRecord:
        """Build and upload a library of the named KBaseAssembly type.

        Raises:
            InvalidArguments: not one or two input files
            UnknownLibraryTypeError: library_type is not a KBaseAssembly type
        """
        inputs = list(inputs or [])
        if not 1 <= len(inputs) <= 2:
            raise InvalidArguments(
                f"One or two input files are required, got {len(inputs)}"
            )
        kind = LibraryType.parse(library_type)
        self.log_info(f"Building {kind.value} from {', '.join(inputs)}")

        if kind is LibraryType.PAIRED_END:
            return self.upload_pe_lib(inputs, insert, stdev, outward, convert_sra)
        if kind is LibraryType.SINGLE_END:
            return self.upload_se_lib(inputs, convert_sra)
        return self.upload_ref(inputs, refname)

    def save_library(self, record: LibraryRecord, output_file: str) -> str:
        """Write the library record as JSON to output_file."""
        return self.save_json(output_file, record.to_dict())

    def upload_library_to_file(
        self, library_type: str, inputs: List[str], output_file: str, **params: Any
    ) -> LibraryRecord:
        """Build, upload and save a library in one call."""
        record = self.upload_library(library_type, inputs, **params)
        self.save_library(record, output_file)
        return record
