"""Loading node lists from JSON and writing them back."""

import json

import pytest

from adapters.json_exporter import export_nodes_json
from adapters.node_loader import NodeFileError, extract_node_list, load_nodes, replace_node_list


class TestNodeLoader:
    def test_bare_list(self, tmp_path):
        path = tmp_path / "nodes.json"
        path.write_text(json.dumps([{"name": "a", "server": "1.1.1.1"}]), encoding="utf-8")

        assert load_nodes(path) == [{"name": "a", "server": "1.1.1.1"}]

    def test_proxies_object(self):
        document = {"port": 7890, "proxies": [{"name": "a", "server": "1.1.1.1"}]}

        assert extract_node_list(document) == [{"name": "a", "server": "1.1.1.1"}]

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "nodes.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(NodeFileError):
            load_nodes(path)

    @pytest.mark.parametrize("document", [{"rules": []}, "text", [1, 2], [{"name": "a"}, "b"]])
    def test_wrong_shapes(self, document):
        with pytest.raises(NodeFileError):
            extract_node_list(document)

    def test_replace_keeps_document_shape(self):
        document = {"port": 7890, "proxies": [{"name": "a"}]}

        replaced = replace_node_list(document, [{"name": "b"}])

        assert replaced == {"port": 7890, "proxies": [{"name": "b"}]}
        assert document["proxies"] == [{"name": "a"}]
        assert replace_node_list([{"name": "a"}], [{"name": "b"}]) == [{"name": "b"}]


class TestJsonExporter:
    def test_unicode_labels_stay_readable(self, tmp_path):
        path = export_nodes_json(
            document=[{"name": "Real:JP***-Nominal:日本 01", "server": "1.1.1.1"}],
            output_path=tmp_path / "out" / "nodes.json",
        )

        text = path.read_text(encoding="utf-8")
        assert "日本 01" in text
        assert json.loads(text)[0]["server"] == "1.1.1.1"
