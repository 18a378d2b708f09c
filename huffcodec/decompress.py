from __future__ import annotations
import logging
import sys

from huffcodec.compression import decompress
from huffcodec.config import Settings, configure_logging
from huffcodec.container import read_record_file

logger = logging.getLogger(__name__)


def decompress_file(path_input: str, path_output: str):
    record = read_record_file(path_input=path_input)
    decompressed_content = decompress(record)
    with open(path_output, "w", encoding="utf-8") as f:
        f.write(decompressed_content)
    logger.info(
        "Decompressed %s into %d symbols at %s",
        path_input,
        len(decompressed_content),
        path_output,
    )


def main(argv=None):
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 2:
        print("usage: huffcodec-decompress <compressed file> <output file>")
        return 2
    configure_logging(Settings.from_env())
    decompress_file(path_input=argv[0], path_output=argv[1])
    return 0


if __name__ == "__main__":
    sys.exit(main())
