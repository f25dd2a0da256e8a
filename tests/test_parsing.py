"""Tests for model output parsing."""

import json

import pytest

from archflow.errors import MalformedArtifactError
from archflow.parsing import (
    extract_json_object,
    parse_design_artifact,
    parse_graph,
    strip_code_fences,
)


class TestStripCodeFences:
    def test_plain_text_unchanged(self):
        assert strip_code_fences("graph TD\n    A --> B") == "graph TD\n    A --> B"

    def test_mermaid_fence(self):
        text = "```mermaid\ngraph TD\n    A --> B\n```"
        assert strip_code_fences(text) == "graph TD\n    A --> B"

    def test_bare_fence(self):
        assert strip_code_fences("```\ngraph LR\n    A --> B\n```") == "graph LR\n    A --> B"

    def test_fence_with_surrounding_prose(self):
        text = "Here is the diagram:\n```mermaid\ngraph TD\n    A --> B\n```\nHope it helps!"
        assert strip_code_fences(text) == "graph TD\n    A --> B"

    def test_unterminated_fence(self):
        assert strip_code_fences("```mermaid\ngraph TD\n    A --> B") == "graph TD\n    A --> B"


class TestExtractJsonObject:
    def test_bare_object(self):
        assert extract_json_object('{"a": 1}') == {"a": 1}

    def test_json_fence(self):
        assert extract_json_object('```json\n{"a": {"b": 2}}\n```') == {"a": {"b": 2}}

    def test_prose_before_and_after(self):
        text = 'Sure! Here is your design:\n{"summary": "x", "n": [1, 2]}\nLet me know.'
        assert extract_json_object(text) == {"summary": "x", "n": [1, 2]}

    def test_outermost_object_only(self):
        text = 'Result: {"outer": {"inner": {"deep": true}}} and also {"other": 1}'
        assert extract_json_object(text) == {"outer": {"inner": {"deep": True}}}

    def test_braces_inside_strings(self):
        text = 'Output -> {"label": "uses } and { in text", "ok": true}'
        assert extract_json_object(text) == {"label": "uses } and { in text", "ok": True}

    def test_escaped_quote_inside_string(self):
        text = 'x {"label": "say \\"hi\\" }", "n": 1} y'
        assert extract_json_object(text) == {"label": 'say "hi" }', "n": 1}

    def test_skips_non_json_braces(self):
        text = 'Use {braces} carefully. {"real": 1}'
        assert extract_json_object(text) == {"real": 1}

    def test_empty(self):
        with pytest.raises(MalformedArtifactError, match="empty"):
            extract_json_object("   ")

    def test_no_object(self):
        with pytest.raises(MalformedArtifactError, match="no JSON object") as exc:
            extract_json_object("I could not produce a design, sorry.")
        assert exc.value.raw_text == "I could not produce a design, sorry."

    def test_truncated_object(self):
        with pytest.raises(MalformedArtifactError):
            extract_json_object('{"summary": "cut off", "flowData": {"nodes": [')

    def test_truncated_outer_object_does_not_yield_inner(self):
        text = (
            '{"nodes": [{"id": "client", "type": "clientNode", "data": {"label": "Client"}}, '
            '{"id": "api", "type": "serverNode", "data": {"lab'
        )
        with pytest.raises(MalformedArtifactError, match="no JSON object"):
            extract_json_object(text)

    def test_resumes_after_undecodable_span(self):
        text = 'Shape: {nodes: [{id}], edges: []} then {"nodes": [], "edges": []}'
        assert extract_json_object(text) == {"nodes": [], "edges": []}

    def test_top_level_array_is_not_an_object(self):
        with pytest.raises(MalformedArtifactError):
            extract_json_object("[1, 2, 3]")


class TestParseGraph:
    def test_valid(self, sample_graph_data):
        graph = parse_graph(json.dumps(sample_graph_data))
        assert len(graph.nodes) == 6
        assert len(graph.edges) == 6

    def test_nested_under_flow_data(self, sample_graph_data):
        graph = parse_graph(json.dumps({"flowData": sample_graph_data}))
        assert len(graph.nodes) == 6

    def test_dangling_edge(self, sample_graph_data):
        sample_graph_data["edges"].append({"id": "e99", "source": "client", "target": "nowhere"})
        with pytest.raises(MalformedArtifactError, match="invalid graph"):
            parse_graph(json.dumps(sample_graph_data))

    def test_duplicate_node(self, sample_graph_data):
        sample_graph_data["nodes"].append(sample_graph_data["nodes"][0])
        with pytest.raises(MalformedArtifactError, match="duplicate node id"):
            parse_graph(json.dumps(sample_graph_data))

    def test_reply_without_graph(self):
        with pytest.raises(MalformedArtifactError, match="nodes"):
            parse_graph('{"error": "I could not read this diagram"}')

    def test_missing_nodes(self, sample_graph_data):
        del sample_graph_data["nodes"]
        with pytest.raises(MalformedArtifactError, match="invalid graph: nodes"):
            parse_graph(json.dumps(sample_graph_data))

    def test_truncated_reply(self, sample_graph_data):
        text = json.dumps(sample_graph_data)[:200]
        with pytest.raises(MalformedArtifactError):
            parse_graph(text)

    def test_bad_node_kind(self, sample_graph_data):
        sample_graph_data["nodes"][0]["type"] = "rocketNode"
        with pytest.raises(MalformedArtifactError, match="nodes.0.type"):
            parse_graph(json.dumps(sample_graph_data))


class TestParseDesignArtifact:
    def test_wrapped_in_prose_and_fences(self, sample_design_data):
        text = (
            "Absolutely, here's the architecture you asked for.\n\n"
            f"```json\n{json.dumps(sample_design_data, indent=2)}\n```\n\n"
            "Tell me if you'd like any changes."
        )
        artifact = parse_design_artifact(text)
        assert artifact.summary == sample_design_data["summary"]
        assert len(artifact.graph.nodes) == 13

    def test_missing_summary(self, sample_design_data):
        del sample_design_data["summary"]
        with pytest.raises(MalformedArtifactError, match="summary"):
            parse_design_artifact(json.dumps(sample_design_data))

    def test_missing_flow_data(self, sample_design_data):
        del sample_design_data["flowData"]
        with pytest.raises(MalformedArtifactError, match="flowData"):
            parse_design_artifact(json.dumps(sample_design_data))

    def test_empty_flow_data(self, sample_design_data):
        sample_design_data["flowData"] = {}
        with pytest.raises(MalformedArtifactError, match="flowData"):
            parse_design_artifact(json.dumps(sample_design_data))

    def test_broken_referential_integrity(self, sample_design_data):
        sample_design_data["flowData"]["edges"][0]["target"] = "missing"
        with pytest.raises(MalformedArtifactError):
            parse_design_artifact(json.dumps(sample_design_data))
