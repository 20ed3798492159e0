"""
Annotation flattening.

Turns the hierarchical annotation store of a type or field into a flat
``{"php.symfony.ignore": "true"}`` style mapping.
"""

from __future__ import annotations

from ..schema_ast.nodes import AnnotationTree


def flatten_annotation_tree(tree: AnnotationTree, path: list[str] | None = None) -> dict[str, str]:
    """
    Flatten an annotation tree into dotted keys.

    The last value recorded at a path wins. A node's own value comes
    before its children's in the resulting key order.

    Args:
        tree: Annotation tree to flatten
        path: Segments leading to ``tree`` (empty for the root)

    Returns:
        Mapping of dotted key to value
    """
    path = path or []
    result: dict[str, str] = {}

    if tree.values and path:
        result[".".join(path)] = tree.values[-1].value

    for segment, child in tree.children.items():
        for key, value in flatten_annotation_tree(child, [*path, segment]).items():
            result.setdefault(key, value)

    return result


def merge_field_annotations(origin: AnnotationTree | None, current: AnnotationTree) -> dict[str, str]:
    """
    Merge the annotations of a field from its declaring type and from the composing type.

    Keys are merged one by one: a key set on the composing type replaces
    the same key from the declaring type, other declaring-type keys survive.

    Args:
        origin: Field annotations on the type that declared the field (None if unknown)
        current: Field annotations on the type being generated

    Returns:
        Merged flat annotation mapping
    """
    merged = flatten_annotation_tree(origin) if origin is not None else {}
    merged.update(flatten_annotation_tree(current))
    return merged
