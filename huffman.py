import heapq
import math
from collections import Counter


### ERRORS ###
class HuffmanError(Exception):
    """Base class for every failure raised by the Huffman engine."""


class EmptyInputError(HuffmanError):
    """A tree was requested for a frequency table with no symbols."""


class UnknownSymbolError(HuffmanError):
    """The text contains a character that has no code in the table."""


class InvalidCodeTableError(HuffmanError):
    """The code table is malformed, ambiguous or not prefix-free."""


class MalformedEncodingError(HuffmanError):
    """The bit-string is truncated, corrupted or not made of 0/1."""


class DegenerateTreeError(HuffmanError):
    """Tree traversal reached a leaf with an empty code."""


### HUFFMAN NODE CLASS ###
class HuffmanNode:
    """A node in the Huffman tree.

    Leaves carry a character; internal nodes have ``char`` set to None and
    at least a left child. The right child is only missing on the wrapper
    node built for single-character input.
    """
    __slots__ = ("char", "freq", "left", "right")

    def __init__(self, char=None, freq=0, left=None, right=None):
        self.char = char
        self.freq = freq
        self.left = left
        self.right = right

    def is_leaf(self):
        return self.char is not None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode({self.char!r}, {self.freq})"
        return f"HuffmanNode(freq={self.freq})"


### FREQUENCY COUNTING ###
def analyze(text):
    """Counts how often each character occurs in ``text``."""
    return Counter(text)


### TREE AND CODE GENERATION ###
def build_tree(frequency):
    """
    Builds the Huffman tree for a character -> count mapping.

    Heap entries are (weight, ordinal, node). Leaves get ordinals in
    character order and every merged node gets the next free ordinal, so
    ties resolve to the smaller character first and then first-in
    first-out among merged nodes. The same frequencies always give the
    same tree.
    """
    if not frequency:
        raise EmptyInputError("cannot build a Huffman tree from an empty frequency table")

    priority_queue = []
    ordinal = 0
    for char in sorted(frequency):
        freq = frequency[char]
        if freq <= 0:
            raise ValueError(f"frequency of {char!r} must be positive, got {freq}")
        priority_queue.append((freq, ordinal, HuffmanNode(char=char, freq=freq)))
        ordinal += 1
    heapq.heapify(priority_queue)

    # One symbol: hang it under a parent so it gets the code "0"
    if len(priority_queue) == 1:
        _, _, only = priority_queue[0]
        return HuffmanNode(freq=only.freq, left=only)

    while len(priority_queue) > 1:
        left_freq, _, left = heapq.heappop(priority_queue)
        right_freq, _, right = heapq.heappop(priority_queue)
        parent = HuffmanNode(freq=left_freq + right_freq, left=left, right=right)
        heapq.heappush(priority_queue, (parent.freq, ordinal, parent))
        ordinal += 1

    return priority_queue[0][2]


def derive_codes(root):
    """Walks the tree and returns the character -> bit-string table."""
    codes = {}
    # Explicit stack, right pushed first so the left branch is visited first
    stack = [(root, "")]
    while stack:
        node, code = stack.pop()
        if node.is_leaf():
            if not code:
                raise DegenerateTreeError(f"leaf {node.char!r} was reached with an empty code")
            codes[node.char] = code
            continue
        if node.left is None and node.right is None:
            raise DegenerateTreeError(f"internal node at {code!r} has no children")
        if node.right is not None:
            stack.append((node.right, code + "1"))
        if node.left is not None:
            stack.append((node.left, code + "0"))
    return codes


### ENCODING ###
def encode(text, codes):
    """Concatenates the code of every character of ``text`` in order."""
    try:
        return "".join([codes[char] for char in text])
    except KeyError as exc:
        raise UnknownSymbolError(f"character {exc.args[0]!r} has no code in the table") from None


### DECODING ###
def build_decode_trie(codes):
    """
    Inverts a code table into a binary trie.

    Internal trie nodes are dicts keyed by "0"/"1"; a leaf is the decoded
    character itself. Raises InvalidCodeTableError for empty codes,
    non-binary codes, duplicates and prefix collisions.
    """
    root = {}
    for char, code in codes.items():
        if not code:
            raise InvalidCodeTableError(f"code for {char!r} is empty")
        if code.strip("01"):
            raise InvalidCodeTableError(f"code {code!r} for {char!r} contains characters other than 0 and 1")

        node = root
        for bit in code[:-1]:
            child = node.setdefault(bit, {})
            if isinstance(child, str):
                raise InvalidCodeTableError(
                    f"code for {child!r} is a prefix of the code {code!r} for {char!r}")
            node = child

        last = code[-1]
        existing = node.get(last)
        if isinstance(existing, str):
            raise InvalidCodeTableError(f"code {code!r} is assigned to both {existing!r} and {char!r}")
        if existing is not None:
            raise InvalidCodeTableError(f"code {code!r} for {char!r} is a prefix of another code")
        node[last] = char
    return root


def decode(bits, codes):
    """
    Reconstructs text from a bit-string and the code table that produced it.

    The bit-string must end exactly on a code boundary; anything left over
    raises MalformedEncodingError instead of returning a partial result.
    """
    trie = build_decode_trie(codes)
    if bits and not trie:
        raise MalformedEncodingError("cannot decode a non-empty bit-string with an empty code table")

    decoded_chars = []
    node = trie
    consumed = 0
    for position, bit in enumerate(bits):
        if bit not in "01":
            raise MalformedEncodingError(f"invalid bit {bit!r} at position {position}")
        child = node.get(bit)
        if child is None:
            raise MalformedEncodingError(
                f"bits {bits[consumed:position + 1]!r} at position {consumed} match no code")
        if isinstance(child, str):
            decoded_chars.append(child)
            node = trie
            consumed = position + 1
        else:
            node = child

    if node is not trie:
        raise MalformedEncodingError(
            f"bit-string ends in the middle of a code: trailing bits {bits[consumed:]!r}")
    return "".join(decoded_chars)


### ENGINE ENTRY POINTS ###
def compress(text):
    """Returns ``(encoded_bits, code_table)`` for ``text``."""
    if not text:
        return "", {}
    frequency = analyze(text)
    root = build_tree(frequency)
    codes = derive_codes(root)
    return encode(text, codes), codes


def decompress(bits, codes):
    return decode(bits, codes)


### PAYLOAD CONTRACT ###
def compression_stats(text, bits):
    """Size figures for a compressed text, in bytes of UTF-8 and packed bits."""
    original_size = len(text.encode("utf-8", errors="surrogatepass"))
    compressed_size = math.ceil(len(bits) / 8)
    saved = original_size - compressed_size
    saved_percent = round(saved / original_size * 100, 2) if original_size else 0
    return {
        "original_size": original_size,
        "compressed_size": compressed_size,
        "saved": saved,
        "saved_percent": saved_percent,
    }


def compression_response(text):
    """Compresses ``text`` into the JSON-ready compress response."""
    bits, codes = compress(text)
    return {
        "encodedText": bits,
        "codeTable": codes,
        "stats": compression_stats(text, bits),
    }


def parse_code_table(obj):
    """Validates a decoded JSON value as a character -> code mapping."""
    if not isinstance(obj, dict):
        raise InvalidCodeTableError("codeTable must be a JSON object")
    codes = {}
    for char, code in obj.items():
        if not isinstance(char, str) or len(char) != 1:
            raise InvalidCodeTableError(f"codeTable key {char!r} must be exactly one character")
        if not isinstance(code, str):
            raise InvalidCodeTableError(f"code for {char!r} must be a string")
        codes[char] = code
    return codes


def parse_bits(obj):
    if not isinstance(obj, str):
        raise MalformedEncodingError("encodedText must be a string")
    return obj
