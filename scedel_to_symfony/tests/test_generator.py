import unittest

import pytest

from scedel_to_symfony.pipeline import CodegenOptions, SchemaLoader, SymfonyCodeGenerator, WarningCode


def generate(types, options=None):
    repository = SchemaLoader().load_dict({"types": types})
    return SymfonyCodeGenerator().generate(repository, options)


def record(*fields):
    return {"kind": "record", "fields": list(fields)}


def field(name, type_, **extra):
    return {"name": name, "type": type_, **extra}


def string_with(*constraints):
    return {"kind": "named", "name": "String", "constraints": list(constraints)}


def property_attributes(contents, declaration):
    """Attribute lines directly above a ``public <hint> $<name>;`` declaration"""
    lines = contents.split("\n")
    index = lines.index(f"    {declaration}")
    attributes = []
    for line in reversed(lines[:index]):
        if not line.startswith("    #["):
            break
        attributes.insert(0, line.strip()[2:-1])
    return attributes


class TestGeneratorScenarios(unittest.TestCase):
    def test_builtin_constraints_and_codegen_annotations(self):
        result = generate(
            {
                "Post": {
                    "type": record(
                        field("id", "Uint"),
                        field("title", string_with({"name": "min", "arg": 5}, {"name": "max", "arg": 255})),
                        field(
                            "tags",
                            {"kind": "array", "items": string_with({"name": "max", "arg": 15}), "constraints": [{"name": "max", "arg": 10}]},
                        ),
                        field("email", "Email"),
                    ),
                    "annotations": {
                        "php.codegen.namespace": "App\\Dto",
                        "php.codegen.dir": "src/Dto",
                        "php.codegen.class": "PostDto",
                    },
                    "fieldAnnotations": {"email": {"php.codegen.property": "authorEmail", "php.symfony.not_blank": "true"}},
                }
            }
        )

        self.assertEqual(len(result.files), 1)
        generated = result.files[0]
        self.assertEqual(generated.path, "src/Dto/PostDto.php")
        self.assertIn("namespace App\\Dto;", generated.contents)
        self.assertIn("final class PostDto", generated.contents)
        self.assertIn("public int $id;", generated.contents)
        self.assertEqual(
            property_attributes(generated.contents, "public string $title;"),
            ["Assert\\NotNull", "Assert\\Length(min: 5)", "Assert\\Length(max: 255)"],
        )
        self.assertEqual(
            property_attributes(generated.contents, "public array $tags;"),
            [
                "Assert\\NotNull",
                'Assert\\Type(type: "array")',
                "Assert\\Count(max: 10)",
                "Assert\\All(constraints: [new Assert\\Length(max: 15)])",
            ],
        )
        self.assertEqual(
            property_attributes(generated.contents, "public string $authorEmail;"),
            ["Assert\\NotNull", "Assert\\Email", "Assert\\NotBlank"],
        )
        self.assertEqual(result.warnings, [])

    def test_control_annotations_and_unknown_php_warnings(self):
        result = generate(
            {
                "Hidden": {"type": record(field("value", "String")), "annotations": {"php.symfony.ignore": "true"}},
                "Post": {
                    "type": record(field("title", "String")),
                    "annotations": {"php.unknown.type": "x"},
                    "fieldAnnotations": {
                        "title": {
                            "php.symfony.constraint.main": "NotBlank",
                            "php.symfony.constraint.secondary": "Length(min: 3)",
                            "php.unknown.field": "x",
                        }
                    },
                },
            },
            CodegenOptions(output_dir="src/Generated/Scedel", default_namespace="App\\Generated\\Scedel"),
        )

        self.assertEqual([f.type_name for f in result.files], ["Post"])
        self.assertEqual(
            property_attributes(result.files[0].contents, "public string $title;"),
            ["Assert\\NotNull", "Assert\\NotBlank", "Assert\\Length(min: 3)"],
        )

        messages = [w.message for w in result.warnings]
        self.assertTrue(any('unrecognized PHP annotation "php.unknown.type"' in m for m in messages))
        self.assertTrue(any('unrecognized PHP annotation "php.unknown.field"' in m for m in messages))
        self.assertEqual({w.location for w in result.warnings}, {"Post", "Post.title"})

    def test_inherited_field_annotations_and_conditional_absent(self):
        result = generate(
            {
                "Post": {
                    "type": record(field("id", "Uint"), field("internalNote", "String", optional=True)),
                    "fieldAnnotations": {"internalNote": {"php.symfony.ignore": True}},
                },
                "PostWithStatus": {
                    "type": {
                        "kind": "intersection",
                        "items": [
                            "Post",
                            record(
                                field(
                                    "status",
                                    {"kind": "union", "items": [{"kind": "literal", "value": "Draft"}, {"kind": "literal", "value": "Published"}]},
                                ),
                                field(
                                    "rejectReason",
                                    {
                                        "kind": "conditional",
                                        "when": {"path": ["status"]},
                                        "then": string_with({"name": "min", "arg": 2}),
                                        "else": {"kind": "absent"},
                                    },
                                ),
                            ),
                        ],
                    }
                },
            }
        )

        self.assertEqual(len(result.files), 2)
        contents = result.file_for("PostWithStatus").contents

        self.assertIn("public string $status;", contents)
        self.assertIn("Assert\\Choice(choices: ['Draft', 'Published'])", contents)
        self.assertNotIn("internalNote", contents)
        self.assertEqual(property_attributes(contents, "public ?string $rejectReason;"), ["Assert\\Length(min: 2)"])
        self.assertIn("?string $rejectReason = null", contents)
        self.assertIn(WarningCode.CONDITIONAL_ABSENT_SIMPLIFIED.value, [w.code for w in result.warnings])

    def test_independent_length_bounds(self):
        result = generate({"Post": {"type": record(field("title", string_with({"name": "min", "arg": 5}, {"name": "max", "arg": 255})))}})

        attributes = property_attributes(result.files[0].contents, "public string $title;")
        self.assertIn("Assert\\Length(min: 5)", attributes)
        self.assertIn("Assert\\Length(max: 255)", attributes)
        self.assertNotIn("Assert\\Length(min: 5, max: 255)", attributes)

    def test_literal_union_is_single_choice(self):
        status = {"kind": "union", "items": [{"kind": "literal", "value": "Draft"}, {"kind": "literal", "value": "Published"}]}
        result = generate({"Post": {"type": record(field("status", status))}})

        attributes = property_attributes(result.files[0].contents, "public string $status;")
        self.assertEqual(attributes, ["Assert\\NotNull", "Assert\\Choice(choices: ['Draft', 'Published'])"])
        self.assertFalse(any(a.startswith("Assert\\EqualTo") for a in attributes))

    def test_optional_field_without_default(self):
        result = generate({"Post": {"type": record(field("id", "Uint"), field("note", "String", optional=True))}})
        contents = result.files[0].contents

        self.assertEqual(property_attributes(contents, "public ?string $note;"), [])
        self.assertIn("        ?string $note = null\n", contents)


class TestGeneratorBehavior(unittest.TestCase):
    def test_output_is_deterministic(self):
        types = {
            "Zeta": {"type": record(field("ref", "Alpha"), field("tags", {"kind": "union", "items": ["Int", "String"]}))},
            "Alpha": {"type": record(field("missing", "Nope"))},
        }

        first = generate(types)
        second = generate(types)
        reordered = generate(dict(reversed(list(types.items()))))

        self.assertEqual(first, second)
        self.assertEqual(first, reordered)
        self.assertEqual([f.type_name for f in first.files], ["Alpha", "Zeta"])

    def test_default_options(self):
        result = generate({"Post": {"type": record(field("id", "Int"))}})

        generated = result.files[0]
        self.assertEqual(generated.path, "src/Generated/Scedel/Post.php")
        self.assertIn("namespace App\\Generated\\Scedel;", generated.contents)
        self.assertIn("public function __construct(", generated.contents)

    def test_options_and_no_constructor(self):
        options = CodegenOptions(output_dir=" out/Gen/ ", default_namespace="Acme\\Model", generate_constructors=False)
        result = generate({"Post": {"type": record(field("id", "Int"))}}, options)

        generated = result.files[0]
        self.assertEqual(generated.path, "out/Gen/Post.php")
        self.assertIn("namespace Acme\\Model;", generated.contents)
        self.assertNotIn("__construct", generated.contents)
        self.assertTrue(generated.contents.endswith("    public int $id;\n\n}\n"))

    def test_file_and_empty_namespace_annotations(self):
        result = generate(
            {
                "Post": {
                    "type": record(field("id", "Int")),
                    "annotations": {"php.codegen.file": " Entity/PostEntity.php ", "php.codegen.namespace": "  ", "php.codegen.dir": "lib/"},
                }
            }
        )

        self.assertEqual(result.files[0].path, "lib/Entity/PostEntity.php")
        self.assertIn("namespace App\\Generated\\Scedel;", result.files[0].contents)

    def test_class_name_is_normalized(self):
        result = generate({"blog-post": {"type": record(field("id", "Int"))}})

        self.assertEqual(result.files[0].path, "src/Generated/Scedel/Blogpost.php")
        self.assertIn("final class Blogpost", result.files[0].contents)

    def test_invalid_class_name_falls_back_to_type_name(self):
        result = generate({"Post": {"type": record(field("id", "Int")), "annotations": {"php.codegen.class": "--"}}})

        self.assertIn("final class Post", result.files[0].contents)
        self.assertEqual([(w.code, w.location) for w in result.warnings], [("invalid_class_name", "Post")])

    def test_invalid_property_names(self):
        result = generate(
            {
                "Post": {
                    "type": record(field("title", "String"), field("--", "String")),
                    "fieldAnnotations": {"title": {"php.codegen.property": "!!"}},
                }
            }
        )

        contents = result.files[0].contents
        self.assertIn("public string $title;", contents)
        self.assertEqual([(w.code, w.location) for w in result.warnings], [("invalid_property_name", "Post.--")])

    def test_property_name_is_normalized(self):
        result = generate({"Post": {"type": record(field("Title", "String"), field("2fa", "Bool"))}})

        contents = result.files[0].contents
        self.assertIn("public string $title;", contents)
        self.assertIn("public bool $field2fa;", contents)

    def test_non_record_types_are_skipped(self):
        result = generate({"Slug": {"type": "String"}, "Post": {"type": record(field("slug", "Slug"))}})

        self.assertEqual([f.type_name for f in result.files], ["Post"])
        self.assertEqual([(w.code, w.location) for w in result.warnings], [("skipped_non_record_type", "Slug")])
        self.assertIn("public string $slug;", result.files[0].contents)

    def test_ignored_types_are_silent(self):
        result = generate({"Slug": {"type": "String", "annotations": {"php.symfony.ignore": "yes"}}})

        self.assertEqual(result.files, [])
        self.assertEqual(result.warnings, [])

    def test_ignore_flag_parsing(self):
        result = generate({"Post": {"type": record(field("id", "Int")), "annotations": {"php.symfony.ignore": "maybe"}}})

        self.assertEqual(len(result.files), 1)

    def test_cross_type_references(self):
        result = generate(
            {
                "Author": {"type": record(field("name", "String")), "annotations": {"php.codegen.namespace": "App\\People"}},
                "Comment": {"type": record(field("text", "String"))},
                "Post": {
                    "type": record(
                        field("author", "Author"),
                        field("comments", {"kind": "array", "items": "Comment"}),
                        field("pinned", "Comment?"),
                    )
                },
            }
        )

        contents = result.file_for("Post").contents
        self.assertEqual(
            property_attributes(contents, "public \\App\\People\\Author $author;"),
            ["Assert\\NotNull", "Assert\\Valid"],
        )
        self.assertIn("     * @var list<Comment>\n", contents)
        self.assertEqual(property_attributes(contents, "public ?Comment $pinned;"), ["Assert\\Valid"])
        self.assertEqual(result.warnings, [])

    def test_alias_of_record_gets_its_own_class(self):
        result = generate({"Post": {"type": record(field("id", "Int"))}, "PostView": {"type": "Post"}})

        self.assertEqual([f.type_name for f in result.files], ["Post", "PostView"])
        self.assertIn("final class PostView", result.file_for("PostView").contents)

    def test_validation_groups(self):
        result = generate(
            {
                "Post": {
                    "type": record(field("title", string_with({"name": "max", "arg": 20})), field("slug", "String")),
                    "annotations": {
                        "php.symfony.validation.groups": "create, update,",
                        "php.symfony.constraint": "\\App\\Validator\\UniqueSlug",
                    },
                    "fieldAnnotations": {"slug": {"php.symfony.validation.groups": "patch"}},
                }
            }
        )

        contents = result.files[0].contents
        self.assertIn("#[\\App\\Validator\\UniqueSlug(groups: ['create', 'update'])]\nfinal class Post", contents)
        self.assertEqual(
            property_attributes(contents, "public string $title;"),
            ["Assert\\NotNull(groups: ['create', 'update'])", "Assert\\Length(max: 20, groups: ['create', 'update'])"],
        )
        self.assertEqual(property_attributes(contents, "public string $slug;"), ["Assert\\NotNull(groups: ['patch'])"])

    def test_type_override_and_not_blank_flag(self):
        result = generate(
            {
                "Post": {
                    "type": record(field("id", "Int"), field("title", "String")),
                    "fieldAnnotations": {
                        "id": {"php.symfony.type": " int|string "},
                        "title": {"php.symfony.not_blank": "off"},
                    },
                }
            }
        )

        contents = result.files[0].contents
        self.assertIn("public int|string $id;", contents)
        self.assertEqual(property_attributes(contents, "public string $title;"), ["Assert\\NotNull"])

    def test_null_only_field_has_no_not_null(self):
        result = generate({"Post": {"type": record(field("nothing", "Null"))}})

        self.assertEqual(property_attributes(result.files[0].contents, "public mixed $nothing;"), ["Assert\\IsNull"])

    def test_warnings_carry_type_and_field(self):
        result = generate(
            {
                "Post": {
                    "type": record(
                        field("meta", record(field("x", "Int"))),
                        field("ref", "Nope"),
                        field("value", {"kind": "union", "items": ["Int", "String"]}),
                        field("size", {"kind": "named", "name": "Int", "constraints": [{"name": "min", "negated": True, "arg": 1}]}),
                    )
                }
            }
        )

        self.assertEqual(
            [(w.code, w.location) for w in result.warnings],
            [
                ("inline_record_as_array", "Post.meta"),
                ("unknown_named_type", "Post.ref"),
                ("union_mixed_type", "Post.value"),
                ("unsupported_negated_constraint", "Post.size"),
            ],
        )

    def test_empty_repository(self):
        result = generate({})

        self.assertEqual(result.files, [])
        self.assertEqual(result.warnings, [])


if __name__ == "__main__":
    pytest.main([__file__])
