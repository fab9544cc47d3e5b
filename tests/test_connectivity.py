import json
import math

import numpy as np
import pandas as pd
import pytest

from em_neurographs.config import ParserConfig
from em_neurographs.connectivity import (
    ConnectivityParser,
    get_adjacency_matrix,
    get_local_name,
    parse_connectivity,
    parse_linked_structures,
)
from em_neurographs.exceptions import FormatError


def test_node_table(export):
    data = parse_connectivity(export)
    nodes = data.node_table
    assert list(nodes.columns) == ["CellID", "NodeLabel", "NodeUUID"]
    assert nodes["NodeUUID"].tolist() == ["n0", "n1", "n2"]
    assert nodes["CellID"].iloc[0] == 207
    assert nodes["CellID"].iloc[1] == 5107
    assert math.isnan(nodes["CellID"].iloc[2])
    assert nodes["NodeLabel"].tolist() == ["c207", "c5107", "unknown"]


def test_node_count_matches_header(export):
    data = parse_connectivity(export)
    assert len(data.node_table) == export["graph"]["nodesNumber"]
    assert len(data.edge_table) == export["graph"]["edgesNumber"]
    assert data.counts_match()


def test_count_mismatch_is_detected(export, caplog):
    export["graph"]["nodesNumber"] = 4
    data = parse_connectivity(export)
    assert not data.counts_match()
    assert "Header counts do not match" in caplog.text


def test_edge_table(export):
    edges = parse_connectivity(export).edge_table
    assert edges["EdgeUUID"].tolist() == ["e0", "e1"]
    assert edges["Source"].tolist() == [0, 1]
    assert edges["Target"].tolist() == [1, 2]
    assert edges["Directional"].tolist() == [True, False]
    assert edges["Loop"].tolist() == [False, True]
    assert edges["EdgeName"].tolist() == ["ribbon pre", "gap junction"]
    assert edges["EdgeType"].tolist() == ["Ribbon", "Gap"]


def test_edge_indices_are_valid(export):
    data = parse_connectivity(export)
    n_nodes = len(data.node_table)
    for col in ("Source", "Target"):
        assert data.edge_table[col].between(0, n_nodes - 1).all()


def test_parent_ids_last_segment_wins(export):
    edges = parse_connectivity(export).edge_table
    assert edges["ParentIDs"].iloc[0] == [56, 78]
    assert edges["AllParentIDs"].iloc[0] == [[12, 34], [56, 78]]
    assert edges["ParentIDs"].iloc[1] == [90, 91]


def test_loop_defaults_to_false(export):
    del export["graph"]["properties"]["IsLoop"]
    edges = parse_connectivity(export).edge_table
    assert not edges["Loop"].any()


def test_metadata(export):
    data = parse_connectivity(export)
    assert data.file_name == "c207.tlp"
    assert data.parse_date
    np.testing.assert_array_equal(data.contacts, [[1, 2], [2, 3]])


def test_parse_is_idempotent(export):
    data_1 = parse_connectivity(export)
    data_2 = parse_connectivity(export)
    pd.testing.assert_frame_equal(data_1.node_table, data_2.node_table)
    pd.testing.assert_frame_equal(data_1.edge_table, data_2.edge_table)
    assert data_1.edge_table.to_csv() == data_2.edge_table.to_csv()


def test_parse_from_path(export, tmp_path):
    path = tmp_path / "c207.json"
    path.write_text(json.dumps(export))
    data = ConnectivityParser().parse(str(path))
    assert len(data.node_table) == 3
    assert data.file_name == "c207.tlp"


def test_invalid_input():
    with pytest.raises(FormatError):
        parse_connectivity("c207.tlp")
    with pytest.raises(FormatError):
        parse_connectivity(42)


def test_missing_property_names_field(export):
    del export["graph"]["properties"]["edgeType"]
    with pytest.raises(FormatError) as excinfo:
        parse_connectivity(export)
    assert excinfo.value.field == "graph.properties.edgeType"


def test_missing_entry_names_field_and_key(export):
    del export["graph"]["properties"]["Directional"]["edgesValues"]["e1"]
    with pytest.raises(FormatError) as excinfo:
        parse_connectivity(export)
    assert excinfo.value.field == "Directional.edgesValues"
    assert excinfo.value.key == "e1"


def test_malformed_segment(export):
    export["graph"]["properties"]["LinkedStructures"]["edgesValues"]["e0"] = (
        "12-34"
    )
    with pytest.raises(FormatError):
        parse_connectivity(export)


def test_unresolved_edge_is_dropped(export):
    export["graph"]["properties"]["Target"]["edgesValues"]["e1"] = "999"
    data = parse_connectivity(export)
    assert data.edge_table["EdgeUUID"].tolist() == ["e0"]
    assert not data.counts_match()


def test_unresolved_edge_strict(export):
    export["graph"]["properties"]["Target"]["edgesValues"]["e1"] = "999"
    config = ParserConfig(drop_unresolved_edges=False)
    with pytest.raises(FormatError):
        parse_connectivity(export, config=config)


def test_parse_linked_structures():
    assert parse_linked_structures("1->2") == [(1, 2)]
    assert parse_linked_structures("1->2   3->4    ") == [(1, 2), (3, 4)]
    with pytest.raises(FormatError):
        parse_linked_structures("")
    with pytest.raises(FormatError):
        parse_linked_structures("a->b")
    with pytest.raises(FormatError):
        parse_linked_structures(None)


def test_get_local_name():
    assert get_local_name("  ribbon pre\n207 -> 5107") == "ribbon pre"
    assert get_local_name("") == ""


def test_adjacency_matrix(export):
    data = parse_connectivity(export)
    adj_mat = get_adjacency_matrix(data)
    expected = np.array([[0, 1, 0], [0, 0, 1], [0, 1, 0]])
    np.testing.assert_array_equal(adj_mat, expected)


def test_adjacency_matrix_one_degree(export):
    data = parse_connectivity(export)
    adj_mat = get_adjacency_matrix(data, cell_id=207)
    assert adj_mat.sum() == 1
    assert adj_mat[0, 1] == 1


def test_malformed_json_file(tmp_path):
    path = tmp_path / "c207.json"
    path.write_text("{not json")
    with pytest.raises(FormatError) as excinfo:
        parse_connectivity(str(path))
    assert excinfo.value.field == "graph"
