import argparse
import json
import sys

from huffman import (
    HuffmanError,
    compression_response,
    decompress,
    parse_bits,
    parse_code_table,
)


def compress_file(input_path, output_path):
    """
    Compresses a UTF-8 text file into a JSON payload holding the
    encodedText, codeTable and stats. Returns the stats.
    """
    with open(input_path, "r", encoding="utf-8", newline="") as f:
        text = f.read()

    payload = compression_response(text)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False)

    return payload["stats"]


def decompress_file(input_path, output_path):
    """Rebuilds the original text file from a payload written by compress_file."""
    with open(input_path, "r", encoding="utf-8") as f:
        try:
            payload = json.load(f)
        except json.JSONDecodeError as e:
            raise HuffmanError(f"{input_path} is not a valid compressed payload: {e}") from e

    if not isinstance(payload, dict):
        raise HuffmanError(f"{input_path} is not a valid compressed payload")

    bits = parse_bits(payload.get("encodedText"))
    codes = parse_code_table(payload.get("codeTable"))
    text = decompress(bits, codes)

    with open(output_path, "w", encoding="utf-8", newline="") as f:
        f.write(text)

    return output_path


def main(argv=None):
    parser = argparse.ArgumentParser(description="Huffman compress or decompress a text file.")
    parser.add_argument("mode", choices=["c", "d"], help="'c' to compress, 'd' to decompress")
    parser.add_argument("input_file")
    parser.add_argument("output_file")
    args = parser.parse_args(argv)

    try:
        if args.mode == "c":
            stats = compress_file(args.input_file, args.output_file)
            print(f"✅ Compressed '{args.input_file}' → '{args.output_file}' "
                  f"({stats['original_size']} → {stats['compressed_size']} bytes, "
                  f"{stats['saved_percent']}% saved)")
        else:
            decompress_file(args.input_file, args.output_file)
            print(f"✅ Decompressed '{args.input_file}' → '{args.output_file}'")
    except (HuffmanError, OSError, UnicodeDecodeError) as e:
        print(f"❌ {type(e).__name__}: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
