import io

import pytest

from huffcodec.apiservice import app
from huffcodec.compression import EncodedRecord, compress
from huffcodec.container import record_from_bytes, record_to_bytes


@pytest.fixture
def client(tmp_path):
    app.config.update(
        TESTING=True,
        WORKER_FILES_DIR=str(tmp_path / "worker-files"),
        COMPRESSED_FILE_PATH=str(tmp_path / "compressed_file.bin"),
    )
    return app.test_client()


def test_compress_returns_record(client):
    response = client.post("/compress", json={"text": "STREETTEST"})
    assert response.status_code == 201
    assert response.get_json() == {
        "shape": [1, 0, 1, 1, 0, 0, 0],
        "leaves": ["T", "R", "S", "E"],
        "message_bits": [1, 0, 1, 0, 1, 0, 0, 1, 1, 1, 1, 0, 0, 1, 1, 1, 0, 1, 0],
    }


def test_compress_insufficient_alphabet(client):
    response = client.post("/compress", json={"text": "AAAA"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "InsufficientAlphabet"


def test_compress_requires_text(client):
    response = client.post("/compress", json={"body": "STREETTEST"})
    assert response.status_code == 400
    assert response.get_json()["error"] == "BadRequest"


def test_decompress(client):
    response = client.post(
        "/decompress",
        json={
            "shape": [1, 0, 1, 1, 0, 0, 0],
            "leaves": ["T", "R", "S", "E"],
            "message_bits": [0, 1, 0, 0, 1, 1, 1, 0, 1, 1, 0, 1],
        },
    )
    assert response.status_code == 200
    assert response.get_json() == {"text": "TRESS"}


def test_decompress_malformed_tree(client):
    response = client.post(
        "/decompress", json={"shape": [1, 0], "leaves": ["T"], "message_bits": []}
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "MalformedTree"


def test_binary_round_trip(client):
    text = "HAPPY HIP HOP"
    response = client.post("/compress/binary", data=text.encode("utf-8"))
    assert response.status_code == 201
    assert response.mimetype == "application/octet-stream"
    assert "attachment" in response.headers["Content-Disposition"]
    assert record_from_bytes(response.data) == compress(text)

    response = client.post(
        "/decompress/binary",
        data={"upload_file": (io.BytesIO(response.data), "compressed_file.bin")},
        content_type="multipart/form-data",
    )
    assert response.get_json() == {"text": text}


def _upload_chunk(client, record: EncodedRecord, worker_number: int, workers: int):
    return client.post(
        "/upload-encoded-chunk",
        data={
            "upload_file": (io.BytesIO(record_to_bytes(record)), "chunk.bin"),
            "worker_number": str(worker_number),
            "number_of_workers": str(workers),
        },
        content_type="multipart/form-data",
    )


def test_fetch_before_any_upload(client):
    assert client.get("/").status_code == 404


def test_upload_chunks_then_fetch_merged_file(client):
    shape = [1, 0, 1, 1, 0, 0, 0]
    leaves = ["T", "R", "S", "E"]
    # uploaded out of order on purpose
    second = EncodedRecord(shape=shape, leaves=leaves, message_bits=[1, 1, 0])
    first = EncodedRecord(shape=shape, leaves=leaves, message_bits=[1, 0, 1])
    assert _upload_chunk(client, second, 2, 2).status_code == 201
    assert client.get("/").status_code == 404
    assert _upload_chunk(client, first, 1, 2).status_code == 201

    response = client.get("/")
    assert response.status_code == 200
    merged = record_from_bytes(response.data)
    assert merged.message_bits == [1, 0, 1, 1, 1, 0]


def test_upload_requires_worker_numbers(client):
    response = client.post(
        "/upload-encoded-chunk",
        data={"upload_file": (io.BytesIO(b""), "chunk.bin"), "worker_number": "x"},
        content_type="multipart/form-data",
    )
    assert response.status_code == 400


@pytest.mark.parametrize("leaves", [[7, 8], ["AB", "C"], [None, "C"]])
def test_decompress_rejects_leaves_that_are_not_symbols(client, leaves):
    response = client.post(
        "/decompress",
        json={"shape": [1, 0, 0], "leaves": leaves, "message_bits": [0, 1]},
    )
    assert response.status_code == 400
    assert response.get_json()["error"] == "MalformedTree"
