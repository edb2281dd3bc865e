"""Tests for process definition validation."""

import pytest

from typelink.core.process_schema import ValidationError, validate_process


def _node(alias="A", **extra):
    node = {"alias": alias, "operation": "op"}
    node.update(extra)
    return node


class TestValidateProcess:
    """Test validate_process against valid and invalid documents."""

    def test_minimal_process(self):
        doc = {"nodes": [_node()]}

        assert validate_process(doc) is doc

    def test_full_node(self):
        doc = {
            "name": "align",
            "nodes": [
                _node(
                    "align",
                    params={"threads": 4},
                    inputs=[{"name": "reads", "type": "Fastq"}],
                    outputs=[{"name": "bam", "type": "Bam"}],
                    links=[{"property": "reads", "source": "read", "source_property": "reads"}],
                    explicit_inputs=["reads"],
                )
            ],
        }
        validate_process(doc)

    def test_json_string_input(self):
        result = validate_process('{"nodes": [{"alias": "A", "operation": "op"}]}')

        assert result["nodes"][0]["alias"] == "A"

    def test_invalid_json(self):
        with pytest.raises(ValueError, match="Invalid JSON"):
            validate_process("{not json")

    def test_nested_process(self):
        doc = {"nodes": [{"alias": "sub", "process": {"nodes": [_node("inner")]}}]}

        validate_process(doc)

    def test_empty_nodes(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_process({"nodes": []})

        assert exc_info.value.path == "nodes"
        assert "at least one node" in exc_info.value.suggestion

    def test_missing_alias(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_process({"nodes": [{"operation": "op"}]})

        assert exc_info.value.path == "nodes[0]"
        assert "'alias'" in exc_info.value.message

    def test_operation_and_process_both_given(self):
        doc = {"nodes": [{"alias": "A", "operation": "op", "process": {"nodes": [_node()]}}]}

        with pytest.raises(ValidationError) as exc_info:
            validate_process(doc)

        assert "exactly one of 'operation' or 'process'" in exc_info.value.suggestion

    def test_port_without_type(self):
        doc = {"nodes": [_node(inputs=[{"name": "in"}])]}

        with pytest.raises(ValidationError) as exc_info:
            validate_process(doc)

        assert exc_info.value.path == "nodes[0].inputs[0]"
        assert exc_info.value.suggestion == "Add the required field 'type'"

    def test_unknown_link_field(self):
        doc = {"nodes": [_node(links=[{"property": "in", "source": "B", "from": "x"}])]}

        with pytest.raises(ValidationError) as exc_info:
            validate_process(doc)

        assert exc_info.value.path == "nodes[0].links[0]"
        assert "Validation error at nodes[0].links[0]" in str(exc_info.value)
