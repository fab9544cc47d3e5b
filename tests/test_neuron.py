import networkx as nx
import numpy as np
import pandas as pd
import pytest

from em_neurographs.neuron import Neuron, get_animal, get_region, validate_source


def test_source_lookups():
    assert validate_source("t") == "NeitzTemporalMonkey"
    assert validate_source("Inferior") == "NeitzInferiorMonkey"
    assert validate_source("SomeVolume") == "SomeVolume"
    assert get_animal("rc1") == "rabbit"
    assert get_region("i") == "Inferior"
    assert get_region("rc1") == ""


def test_missing_columns():
    with pytest.raises(KeyError):
        Neuron(1, "t", pd.DataFrame({"ID": [1]}))


def test_soma(neuron):
    assert neuron.get_soma_id() == 1
    assert neuron.get_soma_size() == 5.0
    np.testing.assert_array_equal(neuron.get_soma_xyz(), [0.0, 0.0, 0.0])


def test_graph(neuron):
    graph = neuron.graph()
    assert not graph.is_directed()
    assert graph.number_of_nodes() == 5
    assert graph.number_of_edges() == 4
    assert graph.nodes[3]["radius"] == 0.5


def test_directed_graph(neuron):
    digraph = neuron.graph(directed=True)
    assert isinstance(digraph, nx.DiGraph)
    assert dict(digraph.in_degree())[1] == 0
    assert set(digraph.successors(2)) == {3, 4}


def test_empty_neuron():
    neuron = Neuron.from_arrays(1, "t", [], [], [])
    assert neuron.get_soma_id() is None
    assert neuron.get_soma_size() == 0.0
    assert neuron.graph().number_of_nodes() == 0
