from collections import Counter

import pytest

import huffman as huff


SAMPLES = [
    "Hello World!",
    "aaaaaab",
    "ab",
    "abracadabra",
    "the quick brown fox jumps over the lazy dog",
    "Mississippi river\n\tbanks",
]


def test_count_symbols_first_appearance_order():
    leaves = huff.count_symbols("banana")
    assert [(leaf.symbol, leaf.count) for leaf in leaves] == [("b", 1), ("a", 3), ("n", 2)]


def test_count_symbols_empty():
    assert huff.count_symbols("") == []


def test_build_tree_empty_raises():
    with pytest.raises(huff.EmptyInputError):
        huff.build_huffman_tree([])


def test_build_tree_single_leaf_is_root():
    leaf = huff.HuffmanLeaf("x", 4)
    assert huff.build_huffman_tree([leaf]) is leaf


def test_build_tree_smaller_node_goes_right():
    root = huff.build_huffman_tree(huff.count_symbols("aaaaaab"))
    assert root.weight == 7
    assert root.left == huff.HuffmanLeaf("a", 6)
    assert root.right == huff.HuffmanLeaf("b", 1)


def test_build_tree_ties_follow_creation_order():
    root = huff.build_huffman_tree(huff.count_symbols("aabc"))
    codes = huff.generate_huffman_codes(root)
    assert dict(codes) == {"a": "1", "b": "01", "c": "00"}


def test_build_tree_is_deterministic():
    text = "she sells sea shells by the sea shore"
    first = huff.encode(text)
    second = huff.encode(text)
    assert first.tree == second.tree
    assert first.bits == second.bits


@pytest.mark.parametrize("text", SAMPLES)
def test_weight_conservation(text):
    root = huff.build_huffman_tree(huff.count_symbols(text))
    assert root.weight == len(text)
    for node in huff.iter_internal_nodes(root):
        assert node.weight == node.left.weight + node.right.weight


@pytest.mark.parametrize("text", SAMPLES)
def test_leaf_coverage(text):
    root = huff.build_huffman_tree(huff.count_symbols(text))
    leaves = list(huff.iter_leaves(root))
    assert len(leaves) == len(set(text))
    assert {leaf.symbol: leaf.count for leaf in leaves} == Counter(text)


@pytest.mark.parametrize("text", SAMPLES)
def test_codes_are_prefix_free(text):
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.count_symbols(text)))
    assert set(codes) == set(text)
    for a, code_a in codes.items():
        assert code_a and set(code_a) <= {"0", "1"}
        for b, code_b in codes.items():
            if a != b:
                assert not code_b.startswith(code_a)


def test_code_table_is_read_only():
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.count_symbols("abc")))
    with pytest.raises(TypeError):
        codes["z"] = "0"


def test_single_leaf_code_is_empty():
    codes = huff.generate_huffman_codes(huff.HuffmanLeaf("a", 4))
    assert dict(codes) == {"a": ""}


@pytest.mark.parametrize("text", SAMPLES)
def test_roundtrip(text):
    encoded = huff.encode(text)
    assert huff.decode(encoded.tree, encoded.bits) == text


def test_hello_world_scenario():
    encoded = huff.encode("Hello World!")
    leaves = list(huff.iter_leaves(encoded.tree))
    assert len(leaves) == 9
    assert {leaf.symbol for leaf in leaves} == set(" !HWdelor")
    assert huff.decode(encoded.tree, encoded.bits) == "Hello World!"


def test_skewed_input_beats_fixed_width():
    encoded = huff.encode("aaaaaab")
    assert encoded.bits == "0000001"
    assert len(encoded.bits) < 8 * 7


def test_encode_empty_raises():
    with pytest.raises(huff.EmptyInputError):
        huff.encode("")


def test_encode_single_symbol_raises():
    with pytest.raises(huff.AmbiguousSingleSymbolCodeError) as excinfo:
        huff.encode("aaaa")
    assert excinfo.value.symbol == "a"
    assert excinfo.value.count == 4


def test_encode_single_symbol_padded_roundtrip():
    encoded = huff.encode("aaaa", pad_single_symbol=True)
    assert encoded.bits == "0000"
    assert huff.decode(encoded.tree, encoded.bits) == "aaaa"


def test_errors_share_base_class():
    for exc in (huff.EmptyInputError, huff.SymbolNotInTableError,
                huff.AmbiguousSingleSymbolCodeError, huff.InvalidBitError):
        assert issubclass(exc, huff.HuffmanError)
        assert issubclass(exc, ValueError)


def test_encode_symbol_missing_from_table():
    codes = huff.generate_huffman_codes(huff.build_huffman_tree(huff.count_symbols("ab")))
    with pytest.raises(huff.SymbolNotInTableError) as excinfo:
        huff.huffman_encode("abc", codes)
    assert excinfo.value.symbol == "c"
    assert isinstance(excinfo.value, KeyError)
    assert "'c'" in str(excinfo.value)


def test_decode_drops_partial_trailing_code():
    encoded = huff.encode("aabc")
    assert encoded.bits == "110100"
    assert huff.decode(encoded.tree, encoded.bits[:-1]) == "aab"


def test_decode_empty_bitstring():
    tree = huff.encode("abc").tree
    assert huff.decode(tree, "") == ""


def test_decode_rejects_non_bit_characters():
    tree = huff.encode("abc").tree
    with pytest.raises(huff.InvalidBitError) as excinfo:
        huff.decode(tree, "01x0")
    assert excinfo.value.position == 2


def test_decode_single_leaf_rejects_one_bits():
    tree = huff.encode("aaa", pad_single_symbol=True).tree
    with pytest.raises(huff.InvalidBitError):
        huff.decode(tree, "001")


def test_internal_node_requires_two_children():
    leaf = huff.HuffmanLeaf("a", 2)
    with pytest.raises(TypeError):
        huff.HuffmanInternal(3, None, leaf)
    with pytest.raises(TypeError):
        huff.HuffmanInternal(3, leaf, "b")


def test_roundtrip_bytes():
    encoded = huff.encode(b"abbccc")
    decoded = huff.decode(encoded.tree, encoded.bits)
    assert decoded == b"abbccc"
    assert isinstance(decoded, bytes)


def test_roundtrip_bytes_single_symbol_padded():
    encoded = huff.encode(b"zzz", pad_single_symbol=True)
    assert huff.decode(encoded.tree, encoded.bits) == b"zzz"


def test_roundtrip_multi_character_symbols():
    symbols = ["x", "yy", "yy"]
    encoded = huff.encode(symbols)
    assert huff.decode(encoded.tree, encoded.bits) == symbols


def test_roundtrip_mixed_symbols():
    symbols = [1, "a", 1, (2, 3), 300]
    encoded = huff.encode(symbols)
    assert huff.decode(encoded.tree, encoded.bits) == symbols


def test_codes_for_encoding():
    root = huff.build_huffman_tree(huff.count_symbols("aab"))
    assert dict(huff.codes_for_encoding(root)) == dict(huff.generate_huffman_codes(root))

    leaf = huff.HuffmanLeaf("a", 3)
    with pytest.raises(huff.AmbiguousSingleSymbolCodeError):
        huff.codes_for_encoding(leaf)
    padded = huff.codes_for_encoding(leaf, pad_single_symbol=True)
    assert dict(padded) == {"a": "0"}
    with pytest.raises(TypeError):
        padded["b"] = "1"
