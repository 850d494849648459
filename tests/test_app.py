import json
import logging

import huffman
from app import resolve_log_level


def test_health(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_compress_returns_table_and_stats(client):
    response = client.post("/api/compress", json={"text": "abracadabra"})
    assert response.status_code == 200
    data = response.get_json()
    assert set(data["codeTable"]) == {"a", "b", "r", "c", "d"}
    assert set(data["encodedText"]) <= {"0", "1"}
    assert data["stats"]["original_size"] == 11
    assert data["stats"]["compressed_size"] == (len(data["encodedText"]) + 7) // 8


def test_compress_empty_text(client):
    response = client.post("/api/compress", json={"text": ""})
    assert response.status_code == 200
    data = response.get_json()
    assert data["encodedText"] == ""
    assert data["codeTable"] == {}


def test_round_trip_through_api(client):
    text = 'She said "hi"\nthen\tleft \\ 🙂 ünïcode'
    compressed = client.post("/api/compress", json={"text": text}).get_json()

    # the table travels as JSON text, as it would between processes
    body = json.loads(json.dumps({
        "encodedText": compressed["encodedText"],
        "codeTable": compressed["codeTable"],
    }))
    response = client.post("/api/decompress", json=body)
    assert response.status_code == 200
    assert response.get_json() == {"text": text}


def test_compress_response_keeps_characters_unescaped(client):
    response = client.post("/api/compress", json={"text": "ééa"})
    assert "é" in response.get_data(as_text=True)


def test_decompress_table_from_another_encoder(client):
    response = client.post("/api/decompress", json={
        "encodedText": "110100",
        "codeTable": {"x": "11", "y": "0", "z": "10"},
    })
    assert response.get_json() == {"text": "xyzy"}


def test_decompress_truncated_bits(client):
    response = client.post("/api/decompress", json={
        "encodedText": "1",
        "codeTable": {"a": "0", "b": "10"},
    })
    assert response.status_code == 400
    data = response.get_json()
    assert data["success"] is False
    assert data["type"] == "MalformedEncodingError"


def test_decompress_ambiguous_table(client):
    response = client.post("/api/decompress", json={
        "encodedText": "0",
        "codeTable": {"a": "0", "b": "01"},
    })
    assert response.status_code == 400
    assert response.get_json()["type"] == "InvalidCodeTableError"


def test_decompress_table_with_multi_character_key(client):
    response = client.post("/api/decompress", json={
        "encodedText": "0",
        "codeTable": {"ab": "0"},
    })
    assert response.status_code == 400
    assert response.get_json()["type"] == "InvalidCodeTableError"


def test_decompress_missing_fields(client):
    response = client.post("/api/decompress", json={"encodedText": "0"})
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_compress_requires_json_object(client):
    response = client.post("/api/compress", data="not json", content_type="text/plain")
    assert response.status_code == 400

    response = client.post("/api/compress", json=["text"])
    assert response.status_code == 400


def test_compress_rejects_non_string_text(client):
    response = client.post("/api/compress", json={"text": 42})
    assert response.status_code == 400


def test_compress_text_limit(app, client):
    app.config["MAX_TEXT_LENGTH"] = 5
    response = client.post("/api/compress", json={"text": "abcdef"})
    assert response.status_code == 413
    assert response.get_json()["success"] is False


def test_decompress_bits_limit(app, client):
    app.config["MAX_ENCODED_LENGTH"] = 3
    response = client.post("/api/decompress", json={
        "encodedText": "0000",
        "codeTable": {"a": "0"},
    })
    assert response.status_code == 413


def test_unknown_route_is_json(client):
    response = client.get("/api/nope")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_wrong_method(client):
    response = client.get("/api/compress")
    assert response.status_code == 405


def test_unexpected_error_is_500(app, client, monkeypatch):
    def boom(text):
        raise RuntimeError("boom")

    monkeypatch.setattr("app.compression_response", boom)
    response = client.post("/api/compress", json={"text": "abc"})
    assert response.status_code == 500
    assert response.get_json() == {"success": False, "error": "Internal server error"}


def test_cors_header(client):
    response = client.post("/api/compress", json={"text": "ab"}, headers={"Origin": "http://localhost:3000"})
    # flask-cors sends either the wildcard or the echoed origin
    assert response.headers.get("Access-Control-Allow-Origin") in ("*", "http://localhost:3000")


def test_api_matches_engine(client):
    text = "mississippi"
    data = client.post("/api/compress", json={"text": text}).get_json()
    bits, codes = huffman.compress(text)
    assert data["encodedText"] == bits
    assert data["codeTable"] == codes


def test_compress_rejects_lone_surrogate(client):
    response = client.post("/api/compress", data='{"text": "a\\ud800b"}', content_type="application/json")
    assert response.status_code == 400
    data = response.get_json()
    assert data["success"] is False
    assert "UTF-8" in data["error"]


def test_decompress_rejects_lone_surrogate_key(client):
    response = client.post(
        "/api/decompress",
        data='{"encodedText": "0", "codeTable": {"\\ud800": "0"}}',
        content_type="application/json",
    )
    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_request_body_over_content_limit(app, client):
    app.config["MAX_CONTENT_LENGTH"] = 16
    response = client.post("/api/compress", json={"text": "x" * 100})
    assert response.status_code == 413
    assert response.get_json()["success"] is False


def test_resolve_log_level():
    assert resolve_log_level(10) == logging.DEBUG
    assert resolve_log_level("warning") == "WARNING"
    logging.getLogger("huffman-test").setLevel(resolve_log_level(10))
