import pytest
from dottree.tree_model import (
    TreeBlock,
    TreeNode,
    compute_is_last,
    compute_is_leaf,
    find_tree_block,
    iter_tree_blocks,
    iter_tree_blocks_in_range,
    node_index_by_line,
    parse_block,
    subtree_range,
)


def nodes_at(*depths):
    """Build nodes with the given depths, one per line"""
    return [TreeNode(i, d, f"n{i}") for i, d in enumerate(depths)]


DOCUMENT = [
    "Some notes",
    "├─ a",
    "│  └─ b",
    "└─ c",
    "",
    "more text",
    "+-- d",
]


class TestFindTreeBlock:
    @pytest.mark.parametrize("around", [1, 2, 3])
    def test_expands_to_whole_block(self, around):
        assert find_tree_block(DOCUMENT, around) == TreeBlock(1, 3)

    def test_single_line_block(self):
        assert find_tree_block(DOCUMENT, 6) == TreeBlock(6, 6)

    @pytest.mark.parametrize("around", [0, 4, 5, -1, 7])
    def test_not_a_tree_line(self, around):
        assert find_tree_block(DOCUMENT, around) is None


class TestIterBlocks:
    def test_whole_document(self):
        assert list(iter_tree_blocks(DOCUMENT)) == [TreeBlock(1, 3), TreeBlock(6, 6)]

    def test_window_cuts_blocks(self):
        """Blocks found in a window never reach outside of it"""
        assert list(iter_tree_blocks_in_range(DOCUMENT, 2, 5)) == [TreeBlock(2, 3)]

    def test_window_past_the_end(self):
        assert list(iter_tree_blocks_in_range(DOCUMENT, 5, 100)) == [TreeBlock(6, 6)]

    def test_empty_document(self):
        assert list(iter_tree_blocks([])) == []


class TestParseBlock:
    def test_parse(self):
        assert parse_block(DOCUMENT, 1, 3) == [
            TreeNode(1, 0, "a"),
            TreeNode(2, 1, "b"),
            TreeNode(3, 0, "c"),
        ]

    def test_skips_unparseable_lines(self):
        """A line the classifier accepts but the parser rejects leaves a gap"""
        lines = ["├─ a", "x │ y", "└─ b"]
        assert find_tree_block(lines, 0) == TreeBlock(0, 2)
        nodes = parse_block(lines, 0, 2)
        assert [n.source_line for n in nodes] == [0, 2]
        assert node_index_by_line(nodes) == {0: 0, 2: 1}

    def test_keeps_depth_jumps(self):
        nodes = parse_block(["├─ a", "│     └─ b"], 0, 1)
        assert [n.depth for n in nodes] == [0, 2]


# fmt: off
@pytest.mark.parametrize(
    "depths, expected",
    [
        pytest.param([0, 1, 1, 2, 1, 0], [False, False, False, True, True, True], id="nested_runs"),
        pytest.param([0, 1, 1, 0],       [False, False, True, True],              id="two_roots"),
        pytest.param([0],                [True],                                  id="single"),
        pytest.param([1, 0, 1],          [True, True, True],                      id="shallower_ends_run"),
        pytest.param([0, 2, 1],          [True, True, True],                      id="jump"),
    ],
)
def test_compute_is_last(depths, expected):
    assert compute_is_last(nodes_at(*depths)) == expected


@pytest.mark.parametrize(
    "depths, expected",
    [
        pytest.param([0, 1, 2, 1], [False, False, True, True], id="nested"),
        pytest.param([0, 0],       [True, True],               id="flat"),
        pytest.param([0, 2],       [False, True],              id="jump"),
        pytest.param([],           [],                         id="empty"),
    ],
)
def test_compute_is_leaf(depths, expected):
    assert compute_is_leaf(nodes_at(*depths)) == expected


@pytest.mark.parametrize(
    "depths, index, expected",
    [
        pytest.param([0, 1, 2, 0], 0, (0, 2), id="whole_subtree"),
        pytest.param([0, 1, 2, 0], 1, (1, 2), id="inner_subtree"),
        pytest.param([0, 1, 2, 0], 3, (3, 3), id="leaf"),
        pytest.param([0, 1, 1, 1], 1, (1, 1), id="sibling_not_child"),
    ],
)
def test_subtree_range(depths, index, expected):
    assert subtree_range(nodes_at(*depths), index) == expected
# fmt: on


def test_synthetic_node():
    node = TreeNode.synthetic(2)
    assert node.is_synthetic
    assert node.depth == 2
    assert node.text == ""


def test_copy_is_independent():
    node = TreeNode(3, 1, "x")
    copy = node.copy()
    copy.depth = 5
    assert node.depth == 1
    assert copy == TreeNode(3, 5, "x")
