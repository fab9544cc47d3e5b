import json
import os

import pandas as pd

from em_neurographs import cli


def test_parse_connectivity(export, tmp_path, capsys):
    path = tmp_path / "c207.json"
    path.write_text(json.dumps(export))
    out_dir = tmp_path / "tables"
    code = cli.main(["parse-connectivity", str(path), "--out-dir", str(out_dir)])
    assert code == 0
    assert "Nodes: 3 (header: 3)" in capsys.readouterr().out
    assert len(pd.read_csv(out_dir / "edges.csv")) == 2


def test_swc(tmp_path):
    nodes = tmp_path / "nodes.csv"
    edges = tmp_path / "edges.csv"
    pd.DataFrame(
        {"ID": [1, 2], "X": [0.0, 1.0], "Y": [0.0, 0.0], "Z": [0.0, 0.0], "R": [2.0, 1.0]}
    ).to_csv(nodes, index=False)
    pd.DataFrame({"A": [1], "B": [2]}).to_csv(edges, index=False)
    code = cli.main(
        ["swc", str(nodes), str(edges), "--neuron-id", "9", "--source", "t", "--out-dir", str(tmp_path)]
    )
    assert code == 0
    assert os.path.exists(tmp_path / "c9.swc")


def test_swc_graph_error(tmp_path, capsys):
    nodes = tmp_path / "nodes.csv"
    edges = tmp_path / "edges.csv"
    pd.DataFrame(
        {"ID": [1, 2, 3], "X": [0.0] * 3, "Y": [0.0] * 3, "Z": [0.0] * 3, "R": [2.0, 1.0, 1.0]}
    ).to_csv(nodes, index=False)
    pd.DataFrame({"A": [1], "B": [2]}).to_csv(edges, index=False)
    code = cli.main(
        ["swc", str(nodes), str(edges), "--neuron-id", "9", "--source", "t", "--out-dir", str(tmp_path)]
    )
    assert code == 1
    assert "multiple or zero roots" in capsys.readouterr().err


def test_parse_connectivity_dropped_edge(export, tmp_path, capsys):
    export["graph"]["properties"]["Target"]["edgesValues"]["e1"] = "999"
    path = tmp_path / "c207.json"
    path.write_text(json.dumps(export))
    out_dir = tmp_path / "tables"
    code = cli.main(["parse-connectivity", str(path), "--out-dir", str(out_dir)])
    assert code == 0
    assert "Edges: 1 (header: 2)" in capsys.readouterr().out
    assert len(pd.read_csv(out_dir / "edges.csv")) == 1


def test_parse_connectivity_malformed_json(tmp_path, capsys):
    path = tmp_path / "c207.json"
    path.write_text("{not json")
    code = cli.main(["parse-connectivity", str(path)])
    assert code == 1
    assert "ERROR parsing" in capsys.readouterr().err


def test_swc_missing_columns(tmp_path, capsys):
    nodes = tmp_path / "nodes.csv"
    edges = tmp_path / "edges.csv"
    pd.DataFrame({"ID": [1, 2], "X": [0.0, 1.0]}).to_csv(nodes, index=False)
    pd.DataFrame({"A": [1], "B": [2]}).to_csv(edges, index=False)
    code = cli.main(
        ["swc", str(nodes), str(edges), "--neuron-id", "9", "--source", "t", "--out-dir", str(tmp_path)]
    )
    assert code == 1
    assert "ERROR building skeleton for c9" in capsys.readouterr().err


def test_swc_missing_file(tmp_path, capsys):
    code = cli.main(
        ["swc", str(tmp_path / "nodes.csv"), str(tmp_path / "edges.csv"), "--neuron-id", "9", "--source", "t"]
    )
    assert code == 1
    assert "ERROR" in capsys.readouterr().err
