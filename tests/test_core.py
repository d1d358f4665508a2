"""Core tests for mindmap-tools."""

import pytest

import mindmap_tools
from mindmap_tools import EdgeStyle, FormatError, MindMapTree, NodeStyle, Position, StructuralError


def make_tree():
    root = MindMapTree(id="root", content="Root")
    a = root.add_child("A", id="a")
    a.add_child("A1", id="a1")
    root.add_child("B", id="b")
    return root


def test_create_single_node():
    t = MindMapTree(id="root", content="Test Map")
    assert t.count() == 1
    assert t.content == "Test Map"
    assert t.is_leaf
    assert t.max_depth() == 0


def test_missing_id_is_generated():
    t = MindMapTree(content="Untitled")
    assert t.id.startswith("node_")


def test_add_children():
    root = MindMapTree(id="root", content="Root")
    child1 = root.add_child("Child 1")
    root.add_child("Child 2")
    grandchild = child1.add_child("Grandchild")

    assert root.count() == 4
    assert len(root.children) == 2
    assert root.max_depth() == 2
    assert grandchild.id != child1.id


def test_find():
    root = make_tree()
    assert root.find("a1").content == "A1"
    assert root.find("missing") is None
    assert root.find_content("b").id == "b"  # case-insensitive
    assert root.find_content("nonexistent") is None


def test_walk():
    root = make_tree()
    assert [n.content for n in root.walk()] == ["Root", "A", "A1", "B"]
    assert [d for _, d in root.walk_with_depth()] == [0, 1, 2, 1]


def test_walk_deep_tree_without_recursion():
    root = MindMapTree(id="n0", content="0")
    node = root
    for i in range(1, 5000):
        node = node.add_child(str(i), id=f"n{i}")
    assert root.count() == 5000
    assert root.max_depth() == 4999
    assert len(root.to_dict()["children"]) == 1


def test_check_unique_ids():
    root = make_tree()
    root.check_unique_ids()
    root.children[1].id = "a"
    with pytest.raises(StructuralError, match="Duplicate node id"):
        root.check_unique_ids()


def test_to_dict_omits_unset_fields():
    data = MindMapTree(id="x", content="X").to_dict()
    assert data == {"id": "x", "content": "X", "children": []}


def test_to_dict_uses_external_key_names():
    t = MindMapTree(
        id="x",
        content="X",
        style=NodeStyle(background_color="#fff", font_size=12),
        edge_style=EdgeStyle(color="#f00", width=2, style="bezier"),
        position=Position(10, 20),
    )
    data = t.to_dict()
    assert data["style"] == {"backgroundColor": "#fff", "fontSize": 12}
    assert data["edgeStyle"] == {"color": "#f00", "width": 2, "style": "bezier"}
    assert data["position"] == {"x": 10, "y": 20}


def test_dict_roundtrip():
    root = make_tree()
    root.metadata = {"notes": "n", "tags": ["a", "b"]}
    root.children[0].collapsed = True
    assert MindMapTree.from_dict(root.to_dict()) == root


def test_from_dict_does_not_share_metadata():
    data = {"id": "r", "content": "R", "metadata": {"tags": ["x"]}}
    tree = MindMapTree.from_dict(data)
    tree.metadata["tags"].append("y")
    assert data["metadata"]["tags"] == ["x"]


def test_from_dict_reports_path():
    data = {"id": "r", "content": "R", "children": [{"id": "a", "content": "A"}, {"id": "b", "content": 3}]}
    with pytest.raises(FormatError) as info:
        MindMapTree.from_dict(data)
    assert info.value.fragment == "root.children[1].content"


def test_from_dict_rejects_empty_id():
    with pytest.raises(FormatError):
        MindMapTree.from_dict({"id": "", "content": "R"})


def test_from_dict_accepts_label_and_notes():
    tree = MindMapTree.from_dict({"label": "Root", "notes": "remember"})
    assert tree.content == "Root"
    assert tree.metadata == {"notes": "remember"}
    assert tree.id


def test_version():
    assert mindmap_tools.__version__ == "0.1.0"
