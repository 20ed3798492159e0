import unittest

from scedel_to_symfony.pipeline import SchemaLoader
from scedel_to_symfony.pipeline.analyzer import collect_record_fields


def load_types(types):
    return {t.name: t for t in SchemaLoader().load_dict({"types": types}).types}


def record(*names):
    return {"kind": "record", "fields": [{"name": name, "type": "String"} for name in names]}


class TestCollectRecordFields(unittest.TestCase):
    def collect(self, type_name, types):
        types_by_name = load_types(types)
        return collect_record_fields(types_by_name[type_name].expr, types_by_name, frozenset(), type_name)

    def test_record(self):
        fields = self.collect("Post", {"Post": {"type": record("id", "title")}})

        self.assertEqual([f.field.name for f in fields], ["id", "title"])
        self.assertEqual({f.origin_type for f in fields}, {"Post"})

    def test_empty_record(self):
        self.assertEqual(self.collect("Empty", {"Empty": {"type": record()}}), [])

    def test_alias_of_record_reports_declaring_type(self):
        fields = self.collect("PostView", {"Post": {"type": record("id")}, "PostView": {"type": "Post"}})

        self.assertEqual([(f.field.name, f.origin_type) for f in fields], [("id", "Post")])

    def test_nullable_alias(self):
        fields = self.collect("MaybePost", {"Post": {"type": record("id")}, "MaybePost": {"type": "Post?"}})

        self.assertEqual([f.field.name for f in fields], ["id"])

    def test_nullable_wrapper(self):
        fields = self.collect("Wrapped", {"Wrapped": {"type": {"kind": "nullable", "type": record("a")}}})

        self.assertEqual([f.field.name for f in fields], ["a"])

    def test_intersection_keeps_first_position_and_last_value(self):
        types = {
            "Base": {"type": {"kind": "record", "fields": [{"name": "id", "type": "Int"}, {"name": "name", "type": "String"}]}},
            "Extra": {"type": {"kind": "record", "fields": [{"name": "email", "type": "Email"}, {"name": "id", "type": "Uuid"}]}},
            "User": {"type": {"kind": "intersection", "items": ["Base", "Extra"]}},
        }

        fields = self.collect("User", types)

        self.assertEqual([f.field.name for f in fields], ["id", "name", "email"])
        self.assertEqual(fields[0].field.type.name, "Uuid")
        self.assertEqual(fields[0].origin_type, "Extra")
        self.assertEqual(fields[1].origin_type, "Base")

    def test_intersection_with_inline_record(self):
        types = {
            "Base": {"type": record("id")},
            "User": {"type": {"kind": "intersection", "items": ["Base", record("email")]}},
        }

        fields = self.collect("User", types)

        self.assertEqual([(f.field.name, f.origin_type) for f in fields], [("id", "Base"), ("email", "User")])

    def test_intersection_with_non_record_member(self):
        types = {"Base": {"type": record("id")}, "Odd": {"type": {"kind": "intersection", "items": ["Base", "String"]}}}

        self.assertIsNone(self.collect("Odd", types))

    def test_non_record_types(self):
        types = {
            "Slug": {"type": "String"},
            "Tags": {"type": {"kind": "array", "items": "String"}},
            "Status": {"type": {"kind": "union", "items": [record("a"), record("b")]}},
            "Ghost": {"type": "Missing"},
        }

        for name in types:
            with self.subTest(name=name):
                self.assertIsNone(self.collect(name, types))

    def test_alias_cycle_is_not_a_record(self):
        types = {"A": {"type": "B"}, "B": {"type": "A"}}

        self.assertIsNone(self.collect("A", types))

    def test_self_reference_is_not_a_record(self):
        self.assertIsNone(self.collect("Self", {"Self": {"type": {"kind": "intersection", "items": ["Self"]}}}))


if __name__ == "__main__":
    unittest.main()
