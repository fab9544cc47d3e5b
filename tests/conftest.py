import copy

import pandas as pd
import pytest

from em_neurographs.neuron import Neuron


EXPORT = {
    "graph": {
        "attributes": {"file": ["string", "c207.tlp"]},
        "nodesNumber": 3,
        "edgesNumber": 2,
        "edges": [[0, 1], [1, 2]],
        "properties": {
            "ID": {
                "nodesValues": {"n0": "207", "n1": "5107", "n2": "abc"},
            },
            "viewLabel": {
                "nodesValues": {
                    "n0": "c207",
                    "n1": "c5107",
                    "n2": "unknown",
                },
                "edgesValues": {
                    "e0": "ribbon pre\n207 -> 5107",
                    "e1": "gap junction",
                },
            },
            "LinkedStructures": {
                "edgesValues": {
                    "e0": "12->34   56->78",
                    "e1": "   90->91",
                },
            },
            "Source": {"edgesValues": {"e0": "207", "e1": "5107"}},
            "Target": {"edgesValues": {"e0": "5107", "e1": "n2"}},
            "edgeType": {"edgesValues": {"e0": "Ribbon", "e1": "Gap"}},
            "Directional": {"edgesValues": {"e0": "True", "e1": "False"}},
            "IsLoop": {"edgesValues": {"e1": "True"}},
        },
    }
}


@pytest.fixture
def export():
    return copy.deepcopy(EXPORT)


@pytest.fixture
def neuron():
    # soma(1) -> 2 -> 3, 2 -> 4 -> 5
    nodes = pd.DataFrame(
        {
            "ID": [1, 2, 3, 4, 5],
            "XYZum": [
                [0.0, 0.0, 0.0],
                [1.0, 0.0, 0.0],
                [2.0, 1.0, 0.5],
                [1.0, 2.0, 0.25],
                [1.0, 3.0, 0.125],
            ],
            "Rum": [5.0, 1.0, 0.5, 0.75, 0.25],
        }
    )
    edges = pd.DataFrame({"A": [1, 2, 4, 2], "B": [2, 3, 5, 4]})
    return Neuron(207, "t", nodes, edges)
