"""Conversion of SRA archives into FASTQ read files with fastq-dump."""

import os
import subprocess
from typing import Any, List, Optional, Sequence

from .base_utils import BaseUtils
from .errors import (
    ConverterOutputMissingError,
    ConverterProcessFailedError,
    MultiArchiveUnsupportedError,
)

DEFAULT_SRA_CONVERTER = "fastq-dump"

MODE_SINGLE = "single"
MODE_PAIRED = "paired"


def sra_file_root(sra_file: str) -> str:
    """Return sra_file without a trailing .sra extension."""
    if sra_file.endswith(".sra"):
        return sra_file[: -len(".sra")]
    return sra_file


def expected_fastq_files(sra_file: str, mode: str) -> List[str]:
    """FASTQ paths the converter writes for sra_file in the given mode."""
    root = sra_file_root(sra_file)
    if mode == MODE_PAIRED:
        return [f"{root}_{i}.fastq" for i in (1, 2)]
    return [f"{root}.fastq"]


class SRAConvertUtils(BaseUtils):
    """Utilities for extracting FASTQ reads from SRA archives.

    The converter is run as an external program (``fastq-dump`` unless
    configured otherwise). Output files are written next to the archive.
    """

    def __init__(self, sra_converter: Optional[str] = None, **kwargs: Any) -> None:
        """Initialize the SRA converter utilities.

        Args:
            sra_converter: Name or path of the converter program
            **kwargs: Additional keyword arguments passed to BaseUtils
        """
        super().__init__(**kwargs)
        self.sra_converter = sra_converter or DEFAULT_SRA_CONVERTER

    def build_convert_command(self, sra_file: str, mode: str) -> List[str]:
        """Argument list for converting sra_file in the given mode."""
        cmd = [self.sra_converter]
        if mode == MODE_PAIRED:
            cmd.append("--split-files")
        cmd.extend(["--outdir", os.path.dirname(os.path.abspath(sra_file)), sra_file])
        return cmd

    def run_converter(self, cmd: List[str]) -> subprocess.CompletedProcess:
        """Run the converter and check how it terminated.

        Raises:
            ConverterProcessFailedError: the program could not be started or
                was killed by a signal
        """
        self.log_info(f"Convert sra command is [{' '.join(cmd)}]")
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            self.log_error(f"{cmd[0]} failed to execute: {e}")
            raise ConverterProcessFailedError(f"{' '.join(cmd)} failed to execute: {e}") from e

        if result.returncode < 0:
            self.log_error(f"{cmd[0]} died with signal {-result.returncode}")
            raise ConverterProcessFailedError(
                f"{' '.join(cmd)} died with signal {-result.returncode}"
            )
        if result.returncode != 0:
            self.log_warning(
                f"{cmd[0]} exited with status {result.returncode}: {result.stderr.strip()}"
            )
        else:
            self.log_debug(result.stdout.strip())
        return result

    def convert_sra(self, inputs: Sequence[str], mode: str) -> List[str]:
        """Convert an SRA archive into one or two FASTQ files.

        Args:
            inputs: Input paths; only one archive can be converted
            mode: "single" for single-end or "paired" for split paired-end reads

        Returns:
            Paths of the FASTQ files produced, one for single mode and two
            (``_1``/``_2``) for paired mode

        Raises:
            MultiArchiveUnsupportedError: more than one archive in paired mode
            ConverterProcessFailedError: the converter could not run
            ConverterOutputMissingError: an expected FASTQ file was not produced
        """
        if mode not in (MODE_SINGLE, MODE_PAIRED):
            raise ValueError(f"Unknown SRA conversion mode: {mode}")
        if mode == MODE_PAIRED and len(inputs) != 1:
            raise MultiArchiveUnsupportedError("No handling for multiple SRA files")

        sra_file = str(inputs[0])
        outfiles = expected_fastq_files(sra_file, mode)
        self.run_converter(self.build_convert_command(sra_file, mode))

        missing = [outfile for outfile in outfiles if not os.path.exists(outfile)]
        if missing:
            self.log_error(f"Did not find expected {' '.join(missing)}")
            raise ConverterOutputMissingError(
                f"Did not find expected {' '.join(outfiles)} from {self.sra_converter}"
            )
        self.log_info(f"Converted {sra_file} into {' '.join(outfiles)}")
        return outfiles
