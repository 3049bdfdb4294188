import heapq
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple


class HuffmanDecodeError(ValueError):
    """Packed bits cannot be decoded with the given code table."""


class HuffmanNode: # Node for Huffman tree
    def __init__(self, symbol, frequency, left=None, right=None):
        self.symbol = symbol    # byte or None for internal nodes
        self.frequency = frequency
        self.left = left
        self.right = right

    def is_leaf(self) -> bool:
        return self.symbol is not None

    def __repr__(self):
        if self.is_leaf():
            return f"HuffmanNode(symbol={self.symbol}, frequency={self.frequency})"
        return f"HuffmanNode(internal, frequency={self.frequency})"


def freq_table(data: bytes) -> Dict[int, int]:
    ft: Dict[int, int] = {}
    for b in data:
        ft[b] = ft.get(b, 0) + 1
    return ft


class MinPriorityQueue:
    """
    Min-heap of nodes keyed by frequency.
    Nodes with equal frequency come out in the order they went in, so the
    same input always builds the same tree.
    """

    def __init__(self):
        self._heap: List[Tuple[int, int, HuffmanNode]] = []
        self._counter = 0 # insertion sequence, secondary key

    def insert(self, node: HuffmanNode) -> None:
        heapq.heappush(self._heap, (node.frequency, self._counter, node))
        self._counter += 1

    def extract_min(self) -> HuffmanNode:
        if not self._heap:
            raise IndexError("extract_min from an empty priority queue")
        return heapq.heappop(self._heap)[2]

    def size(self) -> int:
        return len(self._heap)

    def __len__(self):
        return len(self._heap)


def leaf_queue(frequency_table: Dict[int, int]) -> MinPriorityQueue: # one leaf per symbol, ascending symbol order
    queue = MinPriorityQueue()
    for symbol in sorted(frequency_table):
        queue.insert(HuffmanNode(symbol, frequency_table[symbol]))
    return queue


def build_huffman_tree(queue: MinPriorityQueue) -> HuffmanNode:
    if queue.size() == 0:
        raise ValueError("cannot build a Huffman tree from an empty queue")

    while queue.size() > 1:
        left = queue.extract_min()
        right = queue.extract_min()
        queue.insert(HuffmanNode(None, left.frequency + right.frequency, left, right)) # internal node with combined frequency

    return queue.extract_min() # root of the tree (a lone leaf when only one symbol exists)


def generate_huffman_codes(root: Optional[HuffmanNode]) -> Dict[int, str]:
    codes: Dict[int, str] = {}
    if root is None:
        return codes

    # A lone leaf has no path; give it one bit so it can still be decoded
    if root.is_leaf():
        codes[root.symbol] = "0"
        return codes

    def generate_codes_helper(node, current_code): # recursive helper to traverse the tree
        if node.is_leaf():
            codes[node.symbol] = current_code
            return
        generate_codes_helper(node.left, current_code + "0")
        generate_codes_helper(node.right, current_code + "1")

    generate_codes_helper(root, "")
    return codes


def is_prefix_free(codes: Iterable[str]) -> bool:
    # In sorted order a prefix always sits directly before some code it prefixes
    ordered = sorted(codes)
    for a, b in zip(ordered, ordered[1:]):
        if b.startswith(a):
            return False
    return True


def encoded_bit_length(frequency_table: Dict[int, int], code_map: Dict[int, str]) -> int:
    return sum(count * len(code_map[symbol]) for symbol, count in frequency_table.items())


def pack_bit_chunks(chunks: Iterable[str]) -> Tuple[bytes, int]:
    """
    Packs a sequence of '0'/'1' strings into bytes, MSB first.
    Returns (packed_bytes, bit_length); the last byte is padded with 0 bits.
    """
    out = bytearray()
    acc = 0
    acc_bits = 0
    bit_length = 0

    for bits in chunks:
        for ch in bits:
            acc = (acc << 1) | (1 if ch == '1' else 0)
            acc_bits += 1
            if acc_bits == 8:
                out.append(acc)
                acc = 0
                acc_bits = 0
        bit_length += len(bits)

    if acc_bits != 0:
        out.append((acc << (8 - acc_bits)) & 0xFF)

    return bytes(out), bit_length


def pack_bits_from_codes(data: bytes, code_map: Dict[int, str]) -> Tuple[bytes, int]:
    return pack_bit_chunks(code_map[b] for b in data)


def unpack_bits(packed: bytes, bit_length: int) -> str:
    return ''.join(f'{byte:08b}' for byte in packed)[:bit_length]


def _check_code_table(code_map: Dict[int, str]) -> None:
    for symbol, code in code_map.items():
        if not 0 <= symbol <= 0xFF:
            raise HuffmanDecodeError(f"symbol {symbol} is not a byte value")
        if not code or code.strip('01'):
            raise HuffmanDecodeError(f"invalid code {code!r} for symbol {symbol}")
    if len(set(code_map.values())) != len(code_map):
        raise HuffmanDecodeError("code table maps two symbols to the same code")
    if not is_prefix_free(code_map.values()):
        raise HuffmanDecodeError("code table is not prefix-free")


def huffman_decode(packed: bytes, bit_length: int, code_map: Dict[int, str]) -> bytes:
    if bit_length < 0:
        raise HuffmanDecodeError(f"negative bit length {bit_length}")
    if len(packed) != (bit_length + 7) // 8:
        raise HuffmanDecodeError(
            f"{len(packed)} packed bytes cannot hold exactly {bit_length} bits"
        )
    if bit_length == 0:
        return b""
    if not code_map:
        raise HuffmanDecodeError("empty code table for a non-empty bit sequence")
    _check_code_table(code_map)

    lookup = {code: symbol for symbol, code in code_map.items()}
    max_code_len = max(len(code) for code in lookup)
    bits = unpack_bits(packed, bit_length)

    decoded = bytearray()
    pos = 0
    while pos < bit_length:
        limit = min(pos + max_code_len, bit_length)
        for end in range(pos + 1, limit + 1):
            symbol = lookup.get(bits[pos:end])
            if symbol is not None:
                break
        else:
            raise HuffmanDecodeError(
                f"no code matches the bits at offset {pos} of {bit_length}"
            )
        decoded.append(symbol)
        pos = end

    return bytes(decoded)


@dataclass
class CompressedUnit:
    packed: bytes
    code_map: Dict[int, str] = field(default_factory=dict)
    bit_length: int = 0

    @property
    def pad_bits(self) -> int:
        return len(self.packed) * 8 - self.bit_length


def huffman_compress(data: bytes) -> CompressedUnit:
    ft = freq_table(data)
    if not ft:
        return CompressedUnit(b"", {}, 0)

    root = build_huffman_tree(leaf_queue(ft))
    code_map = generate_huffman_codes(root)
    packed, bit_length = pack_bits_from_codes(data, code_map)
    return CompressedUnit(packed, code_map, bit_length)


def huffman_decompress(unit: CompressedUnit) -> bytes:
    return huffman_decode(unit.packed, unit.bit_length, unit.code_map)
