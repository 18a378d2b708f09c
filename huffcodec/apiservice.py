from __future__ import annotations
from typing import Dict, List
from flask import Flask, jsonify, request, Response
import logging
import os
import re

from huffcodec.compression import EncodedRecord, compress, decompress
from huffcodec.config import Settings, configure_logging
from huffcodec.container import (
    merge_chunk_records,
    read_record_file,
    record_from_bytes,
    record_to_bytes,
    write_record_file,
)
from huffcodec.errors import HuffmanError

logger = logging.getLogger(__name__)

CHUNK_FILE_PATTERN = re.compile(r"received_file_(\d+)\.bin")


def _settings_config(settings: Settings) -> Dict[str, str]:
    return {
        "WORKER_FILES_DIR": settings.worker_files_dir,
        "COMPRESSED_FILE_PATH": settings.compressed_file_path,
    }


app = Flask(__name__)
app.config.from_mapping(_settings_config(Settings.from_env()))


@app.errorhandler(HuffmanError)
def handle_huffman_error(error: HuffmanError):
    logger.info("Rejected request: %s: %s", type(error).__name__, error)
    return jsonify(error=type(error).__name__, message=str(error)), 400


def _bad_request(message: str):
    return jsonify(error="BadRequest", message=message), 400


@app.post("/compress")
def compress_text():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict) or not isinstance(payload.get("text"), str):
        return _bad_request('expected a JSON object with a "text" string')
    record = compress(payload["text"])
    logger.info(
        "Compressed %d symbols into %d message bits",
        len(payload["text"]),
        len(record.message_bits),
    )
    return jsonify(record.to_dict()), 201


@app.post("/decompress")
def decompress_record():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return _bad_request("expected a JSON encoded record")
    text = decompress(EncodedRecord.from_dict(payload))
    return jsonify(text=text)


@app.post("/compress/binary")
def compress_binary():
    try:
        text = request.get_data().decode("utf-8")
    except UnicodeDecodeError:
        return _bad_request("request body is not UTF-8 text")
    binary_data = record_to_bytes(compress(text))
    response = Response(
        binary_data, status=201, content_type="application/octet-stream"
    )

    # Add headers to suggest a download to the client
    response.headers["Content-Disposition"] = "attachment; filename=compressed_file.bin"
    return response


@app.post("/decompress/binary")
def decompress_binary():
    received_file = request.files.get("upload_file")
    if received_file is None:
        return _bad_request('expected a multipart file field "upload_file"')
    record = record_from_bytes(received_file.read())
    return jsonify(text=decompress(record))


def get_chunk_paths(dir: str) -> List[str]:
    # received_file_<worker_number>.bin, ordered by worker number
    chunk_names = [f for f in os.listdir(dir) if CHUNK_FILE_PATTERN.fullmatch(f)]
    chunk_names.sort(key=lambda f: int(CHUNK_FILE_PATTERN.fullmatch(f).group(1)))
    return [os.path.join(dir, f) for f in chunk_names]


@app.get("/")
def fetch_compressed_file():
    compressed_file_path = app.config["COMPRESSED_FILE_PATH"]
    if not os.path.exists(compressed_file_path):
        return jsonify(error="NotFound", message="no compressed file yet"), 404
    with open(compressed_file_path, "rb") as f:
        binary_data = f.read()
    response = Response(binary_data, content_type="application/octet-stream")

    # Add headers to suggest a download to the client
    response.headers["Content-Disposition"] = "attachment; filename=compressed_file.bin"
    return response


@app.post("/upload-encoded-chunk")
def upload_encoded_chunk():
    # Save the chunk; once every worker has uploaded, merge them into one record
    received_file = request.files.get("upload_file")
    if received_file is None:
        return _bad_request('expected a multipart file field "upload_file"')
    try:
        worker_number = int(request.form["worker_number"])
        number_of_workers = int(request.form["number_of_workers"])
    except (KeyError, ValueError):
        return _bad_request("worker_number and number_of_workers must be integers")
    worker_files_dir = app.config["WORKER_FILES_DIR"]
    os.makedirs(worker_files_dir, exist_ok=True)
    with open(
        os.path.join(worker_files_dir, f"received_file_{worker_number}.bin"), "wb"
    ) as f:
        f.write(received_file.read())
    logger.info("Received chunk %d of %d", worker_number, number_of_workers)

    encoded_chunk_paths = get_chunk_paths(worker_files_dir)
    if len(encoded_chunk_paths) == number_of_workers:
        merged_record = merge_chunk_records(
            [read_record_file(path) for path in encoded_chunk_paths]
        )
        write_record_file(app.config["COMPRESSED_FILE_PATH"], merged_record)
        logger.info("Merged %d chunks", number_of_workers)

    return jsonify(status="ok"), 201


def main():
    settings = Settings.from_env()
    configure_logging(settings)
    app.config.from_mapping(_settings_config(settings))
    app.run(host="0.0.0.0", port=8080)


if __name__ == "__main__":
    main()
