import pytest

from huffcodec.codec import decode_text, encode_text
from huffcodec.errors import MalformedTree
from huffcodec.flatten import flatten_tree, unflatten_tree
from huffcodec.tree import EncodingTreeNode, are_equal, build_huffman_tree


def test_flatten_example_tree(example_tree):
    shape, leaves = flatten_tree(example_tree)
    assert shape == [1, 0, 1, 1, 0, 0, 0]
    assert leaves == ["T", "R", "S", "E"]


def test_unflatten_example_tree(example_tree):
    tree = unflatten_tree([1, 0, 1, 1, 0, 0, 0], ["T", "R", "S", "E"])
    assert are_equal(tree, example_tree)


def test_unflatten_accepts_iterators_and_char_bits(example_tree):
    tree = unflatten_tree(iter("1011000"), iter("TRSE"))
    assert are_equal(tree, example_tree)


def test_unflatten_single_leaf():
    tree = unflatten_tree([0], ["A"])
    assert are_equal(tree, EncodingTreeNode.leaf("A"))


@pytest.mark.parametrize(
    "text",
    [
        "HAPPY HIP HOP",
        "Nana Nana Nana Nana Nana Nana Nana Nana Batman",
        "Research is formalized curiosity. It is poking and prying with a purpose.",
        "abcdefghijklmnopqrstuvwxyz" * 3 + "zzzzzz",
    ],
)
def test_unflatten_inverts_flatten(text):
    tree = build_huffman_tree(text)
    shape, leaves = flatten_tree(tree)
    assert len(shape) == 2 * len(leaves) - 1
    assert are_equal(unflatten_tree(shape, leaves), tree)


def test_deep_tree_survives_every_traversal():
    depth = 5000
    shape = [1] * depth + [0] * (depth + 1)
    leaves = [chr(0x4E00 + i) for i in range(depth + 1)]
    tree = unflatten_tree(shape, leaves)
    assert tree.zero.zero.zero.symbol is None
    assert tree.one.symbol == leaves[-1]

    assert flatten_tree(tree) == (shape, leaves)
    assert are_equal(unflatten_tree(*flatten_tree(tree)), tree)
    text = leaves[-1] + leaves[0] + leaves[depth // 2]
    bits = encode_text(tree, text)
    assert bits[0] == 1
    # codes: last leaf 1 bit, first leaf depth bits, leaf k has depth + 1 - k bits
    assert len(bits) == 1 + depth + (depth + 1 - depth // 2)
    assert decode_text(tree, bits) == text


@pytest.mark.parametrize(
    "shape, leaves",
    [
        ([], []),
        ([1, 0], ["A"]),
        ([1, 0, 0], ["A"]),
        ([1, 0, 0, 0], ["A", "B"]),
        ([1, 0, 0], ["A", "B", "C"]),
        ([0, 0], ["A", "B"]),
    ],
)
def test_unflatten_rejects_malformed_streams(shape, leaves):
    with pytest.raises(MalformedTree):
        unflatten_tree(shape, leaves)
