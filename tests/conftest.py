import pytest

from huffcodec.tree import EncodingTreeNode


def make_example_tree() -> EncodingTreeNode:
    #       *
    #      / \
    #     T   *
    #        / \
    #       *   E
    #      / \
    #     R   S
    leaf = EncodingTreeNode.leaf
    node = EncodingTreeNode.internal
    return node(leaf("T"), node(node(leaf("R"), leaf("S")), leaf("E")))


@pytest.fixture
def example_tree() -> EncodingTreeNode:
    return make_example_tree()
