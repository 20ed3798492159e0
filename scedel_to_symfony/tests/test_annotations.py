import unittest

from scedel_to_symfony.pipeline.analyzer import flatten_annotation_tree, merge_field_annotations
from scedel_to_symfony.pipeline.schema_ast import AnnotationTree


def tree(*entries):
    result = AnnotationTree()
    for key, value in entries:
        result.add(key.split("."), value)
    return result


class TestFlattenAnnotationTree(unittest.TestCase):
    def test_empty(self):
        self.assertEqual(flatten_annotation_tree(AnnotationTree()), {})

    def test_dotted_keys(self):
        flat = flatten_annotation_tree(tree(("php.codegen.namespace", "App\\Dto"), ("php.symfony.ignore", "true")))

        self.assertEqual(flat, {"php.codegen.namespace": "App\\Dto", "php.symfony.ignore": "true"})

    def test_last_value_wins(self):
        flat = flatten_annotation_tree(tree(("php.codegen.class", "First"), ("php.codegen.class", "Second")))

        self.assertEqual(flat, {"php.codegen.class": "Second"})

    def test_node_value_and_children(self):
        flat = flatten_annotation_tree(
            tree(
                ("php.symfony.constraint.unique", "UniqueEntity"),
                ("php.symfony.constraint", "NotBlank"),
            )
        )

        self.assertEqual(list(flat), ["php.symfony.constraint", "php.symfony.constraint.unique"])
        self.assertEqual(flat["php.symfony.constraint"], "NotBlank")

    def test_root_value_is_dropped(self):
        root = AnnotationTree()
        root.add([], "orphan")
        root.add(["doc"], "text")

        self.assertEqual(flatten_annotation_tree(root), {"doc": "text"})

    def test_explicit_path(self):
        subtree = tree(("ignore", "true"))

        self.assertEqual(flatten_annotation_tree(subtree, ["php", "symfony"]), {"php.symfony.ignore": "true"})


class TestMergeFieldAnnotations(unittest.TestCase):
    def test_without_origin(self):
        self.assertEqual(merge_field_annotations(None, tree(("php.symfony.type", "int"))), {"php.symfony.type": "int"})

    def test_current_wins_per_key(self):
        origin = tree(("php.codegen.property", "base"), ("php.symfony.not_blank", "true"))
        current = tree(("php.codegen.property", "override"))

        merged = merge_field_annotations(origin, current)

        self.assertEqual(merged, {"php.codegen.property": "override", "php.symfony.not_blank": "true"})

    def test_same_tree_as_origin_and_current(self):
        same = tree(("php.symfony.ignore", "yes"))

        self.assertEqual(merge_field_annotations(same, same), {"php.symfony.ignore": "yes"})


if __name__ == "__main__":
    unittest.main()
