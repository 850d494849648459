from flask import Flask, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import BadRequest, HTTPException, RequestEntityTooLarge

from huffman import (
    HuffmanError,
    compression_response,
    decompress,
    parse_bits,
    parse_code_table,
)

# -----------------------------------------------------------
# CONFIGURATION
# -----------------------------------------------------------
DEFAULT_CONFIG = {
    # Characters of text accepted by /api/compress
    "MAX_TEXT_LENGTH": 1_000_000,
    # Bits accepted by /api/decompress
    "MAX_ENCODED_LENGTH": 32_000_000,
    "CORS_ORIGINS": "*",
    "LOG_LEVEL": "INFO",
    "MAX_CONTENT_LENGTH": 64 * 1024 * 1024,
}

# -----------------------------------------------------------
# FLASK APP SETUP
# -----------------------------------------------------------
app = Flask(__name__)
app.config.from_mapping(DEFAULT_CONFIG)
app.config.from_prefixed_env("HUFFMAN")

# Code table keys are arbitrary characters; keep them readable and in order
app.json.ensure_ascii = False
app.json.sort_keys = False


def resolve_log_level(value):
    # from_prefixed_env turns HUFFMAN_LOG_LEVEL=10 into the int 10
    if isinstance(value, int):
        return value
    return str(value).upper()


app.logger.setLevel(resolve_log_level(app.config["LOG_LEVEL"]))
CORS(app, resources={r"/api/*": {"origins": app.config["CORS_ORIGINS"]}})


# -----------------------------------------------------------
# HELPER FUNCTIONS
# -----------------------------------------------------------
def error_response(message, status, kind=None):
    body = {"success": False, "error": message}
    if kind:
        body["type"] = kind
    return jsonify(body), status


def get_json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    return data


def check_length(value, limit_key, what):
    limit = int(app.config[limit_key])
    if len(value) > limit:
        raise RequestEntityTooLarge(f"{what} exceeds the limit of {limit}")


def check_utf8(value, what):
    # Lone surrogates survive JSON parsing but cannot be written back as UTF-8
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        raise BadRequest(f"{what} contains a character that cannot be encoded as UTF-8") from None


# -----------------------------------------------------------
# ERROR HANDLERS
# -----------------------------------------------------------
@app.errorhandler(HuffmanError)
def handle_huffman_error(e):
    app.logger.warning("Rejected %s: %s", request.path, e)
    return error_response(str(e), 400, type(e).__name__)


@app.errorhandler(HTTPException)
def handle_http_error(e):
    if e.code and e.code < 500:
        app.logger.warning("Rejected %s: %s %s", request.path, e.code, e.description)
    return error_response(e.description, e.code)


@app.errorhandler(Exception)
def handle_unexpected_error(e):
    app.logger.exception("Error in %s", request.path)
    return error_response("Internal server error", 500)


# -----------------------------------------------------------
# API ROUTES
# -----------------------------------------------------------
@app.route("/api/health")
def health():
    return jsonify({"status": "ok"})


@app.route("/api/compress", methods=["POST"])
def compress_route():
    data = get_json_body()
    text = data.get("text")
    if not isinstance(text, str):
        raise BadRequest("Field 'text' is required and must be a string")
    check_length(text, "MAX_TEXT_LENGTH", "text")
    check_utf8(text, "text")

    result = compression_response(text)
    stats = result["stats"]
    app.logger.info(
        "Compressed %d chars into %d bits (%d symbols, %s%% saved)",
        len(text), len(result["encodedText"]), len(result["codeTable"]), stats["saved_percent"],
    )
    return jsonify(result)


@app.route("/api/decompress", methods=["POST"])
def decompress_route():
    data = get_json_body()
    if "encodedText" not in data or "codeTable" not in data:
        raise BadRequest("Fields 'encodedText' and 'codeTable' are required")

    bits = parse_bits(data["encodedText"])
    check_length(bits, "MAX_ENCODED_LENGTH", "encodedText")
    codes = parse_code_table(data["codeTable"])
    check_utf8("".join(codes), "codeTable")

    text = decompress(bits, codes)
    app.logger.info("Decompressed %d bits into %d chars", len(bits), len(text))
    return jsonify({"text": text})


# -----------------------------------------------------------
if __name__ == "__main__":
    app.run(debug=True)
