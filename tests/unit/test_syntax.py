"""
Unit tests for the tree-sitter backed syntax arena.
"""

from gomorph.java.syntax import JavaParser, NodeKind, parse_java

SOURCE = """class Account {
    int id = 1, version = 2;
    String owner = "Zoë";

    void close() {}
}
"""


def first(tree, kind):
    return next(node for node in tree.root.walk() if node.kind == kind)


class TestArena:
    def test_root_is_first_node(self):
        tree = parse_java(SOURCE)
        assert tree.root.kind == NodeKind.PROGRAM
        assert tree.node(0) is tree.root
        assert tree.root.parent is None
        assert len(tree) > 10

    def test_node_ids_index_the_arena(self):
        tree = parse_java(SOURCE)
        for node in tree.root.walk():
            assert tree.nodes[node.id] is node

    def test_fields_and_text(self):
        tree = parse_java(SOURCE)
        declaration = first(tree, NodeKind.CLASS_DECLARATION)
        assert declaration.child_by_field_name("name").text == "Account"
        assert declaration.child_by_field_name("body").kind == NodeKind.CLASS_BODY
        assert declaration.child_by_field_name("superclass") is None

    def test_repeated_field_names(self):
        tree = parse_java(SOURCE)
        field = first(tree, NodeKind.FIELD_DECLARATION)
        declarators = field.children_by_field_name("declarator")
        assert [d.child_by_field_name("name").text for d in declarators] == ["id", "version"]

    def test_text_slices_bytes(self):
        tree = parse_java(SOURCE)
        literal = first(tree, NodeKind.STRING_LITERAL)
        assert literal.text == '"Zoë"'

    def test_location_is_one_based(self):
        tree = parse_java(SOURCE)
        method = first(tree, NodeKind.METHOD_DECLARATION)
        assert method.location == (5, 5)

    def test_ancestors(self):
        tree = parse_java(SOURCE)
        method = first(tree, NodeKind.METHOD_DECLARATION)
        kinds = [node.kind for node in method.ancestors()]
        assert kinds == [NodeKind.CLASS_BODY, NodeKind.CLASS_DECLARATION, NodeKind.PROGRAM]

    def test_children_of_kind(self):
        tree = parse_java(SOURCE)
        body = first(tree, NodeKind.CLASS_BODY)
        assert len(body.children_of_kind(NodeKind.FIELD_DECLARATION)) == 2
        assert body.first_child_of_kind(NodeKind.METHOD_DECLARATION) is not None
        assert body.first_child_of_kind(NodeKind.CONSTRUCTOR_DECLARATION) is None


class TestSexp:
    def test_named_structure_with_fields(self):
        tree = parse_java("class A {}")
        assert tree.root.to_sexp() == "(program (class_declaration name: (identifier) body: (class_body)))"


class TestParser:
    def test_parse_file(self, tmp_path):
        path = tmp_path / "Account.java"
        path.write_text(SOURCE, encoding="utf-8")
        tree = JavaParser().parse_file(path)
        assert first(tree, NodeKind.CLASS_DECLARATION).child_by_field_name("name").text == "Account"

    def test_accepts_bytes(self):
        tree = parse_java(b"interface Shape {}")
        assert first(tree, NodeKind.INTERFACE_DECLARATION).child_by_field_name("name").text == "Shape"
