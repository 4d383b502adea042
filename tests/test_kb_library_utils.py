"""Tests for building and uploading KBaseAssembly libraries."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import SHOCK_URL
from kbsequpload.errors import (
    InvalidArguments,
    MultiArchiveUnsupportedError,
    OutputWriteFailedError,
    UnknownLibraryTypeError,
    UnrecognizedFileTypeError,
)
from kbsequpload.kb_library_utils import KBLibraryUtils
from kbsequpload.library_types import LibraryType

OPTIONAL_PE_FIELDS = {
    "interleaved",
    "insert_size_mean",
    "insert_size_std_dev",
    "read_orientation_outward",
}


@pytest.fixture
def library_utils(util_kwargs):
    return KBLibraryUtils(**util_kwargs)


@pytest.fixture
def post(fake_kbase):
    with patch("requests.post", side_effect=fake_kbase) as post:
        yield post


class TestPairedEndLibrary:
    """Test suite for upload_pe_lib."""

    def test_two_files_without_options(self, library_utils, make_seq_file, post, fake_kbase):
        r1, r2 = make_seq_file("r_1.fq"), make_seq_file("r_2.fq.gz")
        record = library_utils.upload_pe_lib([r1, r2])
        data = record.to_dict()

        assert set(data) == {"handle_1", "handle_2"}
        assert not OPTIONAL_PE_FIELDS & set(data)
        assert data["handle_1"] == {
            "file_name": "r_1.fq",
            "type": "shock",
            "url": SHOCK_URL,
            "id": "node-1",
            "hid": "KBH_1",
        }
        assert data["handle_2"]["file_name"] == "r_2.fq.gz"
        assert data["handle_2"]["id"] == "node-2"
        assert len(fake_kbase.shock_calls) == 2
        assert len(fake_kbase.handle_calls) == 2

    def test_one_file_is_interleaved(self, library_utils, make_seq_file, post):
        data = library_utils.upload_pe_lib([make_seq_file("inter.fastq")]).to_dict()

        assert data["interleaved"] == 1
        assert set(data) == {"interleaved", "handle_1"}

    def test_insert_options(self, library_utils, make_seq_file, post):
        data = library_utils.upload_pe_lib(
            [make_seq_file("a.fq"), make_seq_file("b.fq")],
            insert=300.0,
            stdev=60.0,
            outward=1,
        ).to_dict()

        assert data["insert_size_mean"] == 300.0
        assert data["insert_size_std_dev"] == 60.0
        assert data["read_orientation_outward"] == 1
        assert "interleaved" not in data

    def test_outward_zero_is_omitted(self, library_utils, make_seq_file, post):
        data = library_utils.upload_pe_lib(
            [make_seq_file("a.fq"), make_seq_file("b.fq")], outward=0
        ).to_dict()
        assert "read_orientation_outward" not in data

    def test_invalid_second_file_uploads_nothing(self, library_utils, make_seq_file, post):
        with pytest.raises(UnrecognizedFileTypeError):
            library_utils.upload_pe_lib([make_seq_file("a.fq"), make_seq_file("b.txt")])
        post.assert_not_called()

    def test_sra_conversion_uses_split_files(self, library_utils, temp_dir, post):
        sra = Path(temp_dir) / "SRR1.sra"
        sra.write_bytes(b"NCBI.sra")

        def fake_dump(cmd, **kwargs):
            for i in (1, 2):
                (Path(temp_dir) / f"SRR1_{i}.fastq").write_text("@r\nACGT\n+\nIIII\n")
            return None

        with patch.object(KBLibraryUtils, "run_converter", side_effect=fake_dump):
            data = library_utils.upload_pe_lib([str(sra)], convert_sra=True).to_dict()

        assert data["handle_1"]["file_name"] == "SRR1_1.fastq"
        assert data["handle_2"]["file_name"] == "SRR1_2.fastq"
        assert "interleaved" not in data

    def test_sra_conversion_requires_one_file(self, library_utils, make_seq_file, post):
        with pytest.raises(MultiArchiveUnsupportedError):
            library_utils.upload_pe_lib(
                [make_seq_file("a.sra"), make_seq_file("b.sra")], convert_sra=True
            )
        post.assert_not_called()


class TestSingleEndAndReference:
    def test_single_end(self, library_utils, make_seq_file, post):
        data = library_utils.upload_se_lib([make_seq_file("se.fasta")]).to_dict()
        assert set(data) == {"handle"}
        assert data["handle"]["file_name"] == "se.fasta"

    def test_single_end_sra(self, library_utils, temp_dir, post):
        sra = Path(temp_dir) / "SRR2.sra"
        sra.write_bytes(b"NCBI.sra")

        def fake_dump(cmd, **kwargs):
            (Path(temp_dir) / "SRR2.fastq").write_text("@r\nACGT\n+\nIIII\n")

        with patch.object(KBLibraryUtils, "run_converter", side_effect=fake_dump) as run:
            data = library_utils.upload_se_lib([str(sra)], convert_sra=True).to_dict()

        assert "--split-files" not in run.call_args[0][0]
        assert data["handle"]["file_name"] == "SRR2.fastq"

    def test_single_end_ignores_second_file(self, library_utils, make_seq_file, fake_kbase, post):
        library_utils.upload_se_lib([make_seq_file("a.fq"), make_seq_file("b.fq")])
        assert len(fake_kbase.shock_calls) == 1

    def test_reference_without_name(self, library_utils, make_seq_file, post):
        data = library_utils.upload_ref([make_seq_file("genome.fa")]).to_dict()
        assert set(data) == {"handle"}

    def test_reference_with_name(self, library_utils, make_seq_file, post):
        data = library_utils.upload_ref([make_seq_file("genome.fa.gz")], "E. coli K-12").to_dict()
        assert data["reference_name"] == "E. coli K-12"
        assert data["handle"]["file_name"] == "genome.fa.gz"


class TestUploadLibrary:
    """Test suite for upload_library and save_library."""

    def test_dispatches_by_type(self, library_utils, make_seq_file, post):
        record = library_utils.upload_library(
            "ReferenceAssembly", [make_seq_file("g.fna")], refname="ref"
        )
        assert record.library_type is LibraryType.REFERENCE

    def test_unknown_type_uploads_nothing(self, library_utils, make_seq_file, post):
        with pytest.raises(UnknownLibraryTypeError):
            library_utils.upload_library("MatePairLibrary", [make_seq_file("a.fq")])
        post.assert_not_called()

    @pytest.mark.parametrize("count", [0, 3])
    def test_input_count(self, library_utils, make_seq_file, post, count):
        inputs = [make_seq_file(f"r{i}.fq") for i in range(count)]
        with pytest.raises(InvalidArguments):
            library_utils.upload_library("PairedEndLibrary", inputs)
        post.assert_not_called()

    def test_no_handle_service(self, util_kwargs, make_seq_file, fake_kbase, post):
        util_kwargs["handle_service_url"] = ""
        util = KBLibraryUtils(**util_kwargs)
        data = util.upload_library("SingleEndLibrary", [make_seq_file("se.fq")]).to_dict()

        assert "hid" not in data["handle"]
        assert fake_kbase.handle_calls == []

    def test_saved_json_round_trip(self, library_utils, make_seq_file, temp_dir, post):
        output = os.path.join(temp_dir, "pe.reads.json")
        library_utils.upload_library_to_file(
            "PairedEndLibrary", [make_seq_file("inter.fq")], output, insert=250.0
        )

        with open(output) as f:
            data = json.load(f)
        assert set(data) == {"interleaved", "insert_size_mean", "handle_1"}
        assert data["handle_1"]["hid"] == "KBH_1"

    def test_unwritable_output(self, library_utils, make_seq_file, temp_dir, post):
        record = library_utils.upload_library("SingleEndLibrary", [make_seq_file("se.fq")])
        with pytest.raises(OutputWriteFailedError):
            library_utils.save_library(record, os.path.join(temp_dir, "missing", "out.json"))

    def test_converter_from_config(self, sample_config_file):
        util = KBLibraryUtils(config_file=sample_config_file, token_file=None, kbase_token_file=None)
        assert util.sra_converter == "/opt/sratoolkit/bin/fastq-dump"
        assert KBLibraryUtils(
            sra_converter="fasterq-dump", token_file=None, kbase_token_file=None
        ).sra_converter == "fasterq-dump"
