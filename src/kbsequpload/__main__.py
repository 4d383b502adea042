"""Command-line interface."""

import click

from .errors import InvalidArguments, SeqUploadError
from .kb_library_utils import KBLibraryUtils
from .shared_env_utils import TOKEN_ENV_VAR

EPILOG = """\b
Options for PairedEndLibrary:
  -f (once or twice), --insert, --stdev, --outward

\b
Options for SingleEndLibrary:
  -f (once)

\b
Options for ReferenceAssembly:
  -f (once, contigs FASTA), --refname

\b
Examples:
  kb-seq-upload -t PairedEndLibrary -f read1.fq -f read2.fq --insert 300 --stdev 60 -o pe.reads.json
  kb-seq-upload -t SingleEndLibrary -f read.fasta -o se.reads.json
  kb-seq-upload -t ReferenceAssembly -f genome.fa -o ref.json
"""


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]}, epilog=EPILOG
)
@click.option("-s", "--shock_service_url", "shock_url", metavar="URL",
              help="Shock service URL (D = https://kbase.us/services/shock-api)")
@click.option("-n", "--handle_service_url", "handle_url", metavar="URL",
              help="Handle service URL (D = https://kbase.us/services/handle_service), "
                   "empty to skip handle registration")
@click.option("-o", "--output_file_name", "output", required=True, metavar="JSON",
              help="Output JSON file of the KBaseAssembly type")
@click.option("-f", "--input_file_name", "inputs", multiple=True, required=True, metavar="PATH",
              help="One or two read files (FASTA, FASTQ, or compressed forms)")
@click.option("-t", "--type", "library_type", required=True,
              help="Output KBaseAssembly type (PairedEndLibrary, SingleEndLibrary, ReferenceAssembly)")
@click.option("--token", envvar=TOKEN_ENV_VAR, help="Token string")
@click.option("--sra", "convert_sra", type=click.IntRange(0, 1), default=0, show_default=True,
              help="1 means convert sra file into fastq files first")
@click.option("--insert", type=float, help="Insert size mean")
@click.option("--stdev", type=float, help="Insert size standard deviation")
@click.option("--outward", type=click.IntRange(0, 1),
              help="Set to 1 if reads in the pair point outward")
@click.option("--refname", help="Genome name of the reference contig set")
@click.option("--config", "config_file", type=click.Path(dir_okay=False),
              help="YAML or INI configuration file")
@click.option("--log-level", default="INFO", show_default=True,
              type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False))
@click.version_option(package_name="kbsequpload")
def main(shock_url, handle_url, output, inputs, library_type, token, convert_sra,
         insert, stdev, outward, refname, config_file, log_level) -> None:
    """Upload one or two FASTA/FASTQ files to the shock server."""
    if len(inputs) > 2:
        raise click.UsageError("At most two input files (-f) are allowed")
    try:
        util = KBLibraryUtils(
            name="kb-seq-upload",
            log_level=log_level,
            config_file=config_file,
            token=token,
            shock_url=shock_url,
            handle_service_url=handle_url,
        )
        util.upload_library_to_file(
            library_type,
            list(inputs),
            output,
            insert=insert,
            stdev=stdev,
            outward=outward,
            refname=refname,
            convert_sra=bool(convert_sra),
        )
    except InvalidArguments as e:
        raise click.UsageError(str(e)) from e
    except SeqUploadError as e:
        raise click.ClickException(str(e)) from e


if __name__ == "__main__":
    main(prog_name="kb-seq-upload")  # pragma: no cover
