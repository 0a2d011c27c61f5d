import heapq
import itertools
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Hashable, Iterator, List, Mapping, Sequence, Union


class HuffmanError(ValueError):
    pass

class EmptyInputError(HuffmanError):
    """Tree construction was asked to work on zero symbols."""

class SymbolNotInTableError(HuffmanError, KeyError):
    """The code table has no entry for a symbol of the text being encoded."""
    def __init__(self, symbol):
        super().__init__(f"symbol {symbol!r} has no code in the table")
        self.symbol = symbol

    def __str__(self):
        return self.args[0]

class AmbiguousSingleSymbolCodeError(HuffmanError):
    """
    The text holds one distinct symbol, so its code has length 0 and the
    bit-string would be empty no matter how long the text is.
    Pass pad_single_symbol=True to encode() to use a 1-bit placeholder instead.
    """
    def __init__(self, symbol, count: int):
        super().__init__(f"text is {count} x {symbol!r}; a zero-length code cannot be decoded")
        self.symbol = symbol
        self.count = count

class InvalidBitError(HuffmanError):
    def __init__(self, bit: str, position: int):
        super().__init__(f"unexpected bit {bit!r} at position {position}")
        self.bit = bit
        self.position = position


@dataclass(frozen=True)
class HuffmanLeaf: # one distinct symbol and how often it occurs
    symbol: Hashable
    count: int

    @property
    def weight(self) -> int:
        return self.count

@dataclass(frozen=True)
class HuffmanInternal: # merged node, always two children
    weight: int
    left: "HuffmanNode"
    right: "HuffmanNode"

    def __post_init__(self):
        for child in (self.left, self.right):
            if not isinstance(child, (HuffmanLeaf, HuffmanInternal)):
                raise TypeError(f"internal node needs two child nodes, got {child!r}")

HuffmanNode = Union[HuffmanLeaf, HuffmanInternal]


def is_leaf(node: HuffmanNode) -> bool:
    return isinstance(node, HuffmanLeaf)


def count_symbols(text: Sequence) -> List[HuffmanLeaf]: # one leaf per distinct symbol, in order of first appearance
    return [HuffmanLeaf(symbol, count) for symbol, count in Counter(text).items()]


def build_huffman_tree(nodes) -> HuffmanNode: # nodes: iterable of leaves (or subtrees)
    """
    Merge the two lightest nodes until one root is left.

    Ties on weight are broken by creation order: leaves in the order given,
    then merged nodes in the order they were made. The lighter of the two
    popped nodes becomes the right child.
    """
    sequence = itertools.count() # tie-breaker so the heap never compares nodes
    priority_queue = [(node.weight, next(sequence), node) for node in nodes]
    if not priority_queue:
        raise EmptyInputError("cannot build a Huffman tree from zero symbols")
    heapq.heapify(priority_queue)

    while len(priority_queue) > 1:
        weight_a, _, first = heapq.heappop(priority_queue)
        weight_b, _, second = heapq.heappop(priority_queue)
        merged_node = HuffmanInternal(weight_a + weight_b, left=second, right=first)
        heapq.heappush(priority_queue, (merged_node.weight, next(sequence), merged_node))

    return priority_queue[0][2] # root of the tree


def iter_leaves(root: HuffmanNode) -> Iterator[HuffmanLeaf]:
    stack = [root]
    while stack:
        node = stack.pop()
        if is_leaf(node):
            yield node
        else:
            stack.append(node.right)
            stack.append(node.left)

def iter_internal_nodes(root: HuffmanNode) -> Iterator[HuffmanInternal]:
    stack = [root]
    while stack:
        node = stack.pop()
        if not is_leaf(node):
            yield node
            stack.append(node.right)
            stack.append(node.left)


def generate_huffman_codes(root: HuffmanNode) -> Mapping[Hashable, str]: # read-only symbol -> code mapping
    codes = {}
    def generate_codes_helper(node, current_code): # left adds '0', right adds '1'
        if is_leaf(node):
            codes[node.symbol] = current_code
            return

        generate_codes_helper(node.left, current_code + '0')
        generate_codes_helper(node.right, current_code + '1')

    generate_codes_helper(root, '')
    return MappingProxyType(codes)


def huffman_encode(text: Sequence, code_map: Mapping[Hashable, str]) -> str:
    try:
        return ''.join(code_map[symbol] for symbol in text)
    except KeyError as e:
        raise SymbolNotInTableError(e.args[0]) from None


def join_symbols(symbols: List, root: HuffmanNode):
    """
    Rebuild the decoded sequence in the shape of the encoded input: a str when
    every symbol in the tree is a single character, bytes when every symbol is
    a byte value, otherwise a list of symbols.
    """
    alphabet = [leaf.symbol for leaf in iter_leaves(root)]
    if all(isinstance(s, str) and len(s) == 1 for s in alphabet):
        return ''.join(symbols)
    if all(isinstance(s, int) and not isinstance(s, bool) and 0 <= s < 256 for s in alphabet):
        return bytes(symbols)
    return list(symbols)


def huffman_decode(bitstring: str, root: HuffmanNode):
    """
    Walk the tree bit by bit, emitting a symbol at every leaf.

    A trailing partial code (input ends mid-tree) is dropped. A tree that is
    a single leaf decodes each '0' to its symbol, matching the placeholder
    code codes_for_encoding() assigns. See join_symbols() for the result type.
    """
    decoded = []
    if is_leaf(root):
        for position, bit in enumerate(bitstring):
            if bit != '0':
                raise InvalidBitError(bit, position)
            decoded.append(root.symbol)
        return join_symbols(decoded, root)

    current_node = root
    for position, bit in enumerate(bitstring):
        if bit == '1':
            current_node = current_node.right
        elif bit == '0':
            current_node = current_node.left
        else:
            raise InvalidBitError(bit, position)

        if is_leaf(current_node): # reached a leaf
            decoded.append(current_node.symbol)
            current_node = root

    return join_symbols(decoded, root)


def codes_for_encoding(root: HuffmanNode, pad_single_symbol: bool = False) -> Mapping[Hashable, str]:
    """
    Code table for encoding with root, with the one-leaf case made explicit.

    A root that is a single leaf raises AmbiguousSingleSymbolCodeError, or with
    pad_single_symbol gets the 1-bit placeholder code '0'.
    """
    if not is_leaf(root):
        return generate_huffman_codes(root)
    if not pad_single_symbol:
        raise AmbiguousSingleSymbolCodeError(root.symbol, root.count)
    return MappingProxyType({root.symbol: '0'})


@dataclass(frozen=True)
class EncodedText:
    tree: HuffmanNode
    bits: str


def encode(text: Sequence, pad_single_symbol: bool = False) -> EncodedText:
    """
    Build a tree from the symbol counts of text and encode text with it.

    Raises EmptyInputError for empty text, and AmbiguousSingleSymbolCodeError
    when text has only one distinct symbol unless pad_single_symbol is set.
    """
    root = build_huffman_tree(count_symbols(text))
    code_map = codes_for_encoding(root, pad_single_symbol)
    return EncodedText(tree=root, bits=huffman_encode(text, code_map))


def decode(tree: HuffmanNode, bitstring: str):
    return huffman_decode(bitstring, tree)
