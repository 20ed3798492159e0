import json
from pathlib import Path

import pytest

from scedel_to_symfony.pipeline import CodegenOptions, SchemaLoader, SymfonyCodeGenerator
from scedel_to_symfony.pipeline.schema_ast.nodes import DefaultExprNode


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "default_values_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


def generate_single(field):
    repository = SchemaLoader().load_dict({"types": {"Settings": {"type": {"kind": "record", "fields": [field]}}}})
    return SymfonyCodeGenerator().generate(repository, CodegenOptions())


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda tc: tc["name"])
def test_default_values(test_case):
    """Test default value compilation in the generated constructor"""
    result = generate_single(test_case["field"])
    output = result.files[0].contents

    for expected in test_case["expected"]:
        assert expected in output, f"Expected '{expected}' not found in output:\n{output}"

    expected_warning = test_case.get("warning")
    assert [w.code for w in result.warnings] == ([expected_warning] if expected_warning else [])
    for warning in result.warnings:
        assert warning.location == f"Settings.{test_case['field']['name']}"


def test_unsupported_default_node():
    """A default node the generator does not know is skipped with a warning"""
    repository = SchemaLoader().load_dict({"types": {"Settings": {"type": {"kind": "record", "fields": [{"name": "mode", "type": "String"}]}}}})
    repository.types[0].expr.fields[0].default = DefaultExprNode()

    result = SymfonyCodeGenerator().generate(repository)

    assert [w.code for w in result.warnings] == ["unsupported_default_node"]
    assert "DefaultExprNode" in result.warnings[0].message
    assert "        string $mode\n" in result.files[0].contents


if __name__ == "__main__":
    pytest.main([__file__])
