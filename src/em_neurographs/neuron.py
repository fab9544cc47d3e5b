"""
Reduced neuron data-access layer. A Neuron holds the annotation table of a
single cell, where each row is an annotated location, along with the links
between annotations.

    Annotation table columns:
        "ID" (int): location ID
        "XYZum" (ArrayLike): 3D coordinate in microns
        "Rum" (float): radius in microns

    Link table columns:
        "A" (int): location ID of one end of the link
        "B" (int): location ID of the other end of the link

"""

import logging

import networkx as nx
import numpy as np
import pandas as pd

from em_neurographs.utils import graph_util

logger = logging.getLogger(__name__)

# Volume lookups
SOURCE_ALIASES = {
    "t": "NeitzTemporalMonkey",
    "temporal": "NeitzTemporalMonkey",
    "neitztemporalmonkey": "NeitzTemporalMonkey",
    "i": "NeitzInferiorMonkey",
    "inferior": "NeitzInferiorMonkey",
    "neitzinferiormonkey": "NeitzInferiorMonkey",
    "r": "RC1",
    "rc1": "RC1",
}
SOURCE_ANIMALS = {
    "NeitzTemporalMonkey": "monkey",
    "NeitzInferiorMonkey": "monkey",
    "RC1": "rabbit",
}
SOURCE_REGIONS = {
    "NeitzTemporalMonkey": "Temporal",
    "NeitzInferiorMonkey": "Inferior",
}


class Neuron:
    """
    Class that stores the annotations of a single neuron and builds its
    adjacency graph.
    """

    def __init__(self, neuron_id, source, nodes, edges=None):
        """
        Initializes a Neuron object.

        Parameters
        ----------
        neuron_id : int
            Cell ID of the neuron.
        source : str
            Name (or abbreviation) of the volume the neuron is in.
        nodes : pandas.DataFrame
            Annotation table with the columns "ID", "XYZum" and "Rum".
        edges : pandas.DataFrame, optional
            Link table with the columns "A" and "B". The default is None.

        Returns
        -------
        None
        """
        check_columns(nodes, ("ID", "XYZum", "Rum"), "nodes")
        if edges is None:
            edges = pd.DataFrame(columns=["A", "B"])
        check_columns(edges, ("A", "B"), "edges")

        self.neuron_id = neuron_id
        self.source = validate_source(source)
        self.nodes = nodes.reset_index(drop=True)
        self.edges = edges.reset_index(drop=True)

    @classmethod
    def from_arrays(cls, neuron_id, source, ids, xyz, radii, links=()):
        """
        Builds a Neuron from arrays.

        Parameters
        ----------
        neuron_id : int
            Cell ID of the neuron.
        source : str
            Name (or abbreviation) of the volume the neuron is in.
        ids : ArrayLike
            Location IDs.
        xyz : ArrayLike
            Coordinates with shape (n, 3).
        radii : ArrayLike
            Radii.
        links : Iterable[Tuple[int]], optional
            Pairs of location IDs. The default is ().

        Returns
        -------
        Neuron
            Neuron built from the arrays.
        """
        xyz = np.asarray(xyz, dtype=float).reshape(-1, 3)
        nodes = pd.DataFrame(
            {
                "ID": list(ids),
                "XYZum": [row for row in xyz],
                "Rum": np.asarray(radii, dtype=float),
            }
        )
        edges = pd.DataFrame(list(links), columns=["A", "B"])
        return cls(neuron_id, source, nodes, edges)

    def __repr__(self):
        return (
            f"Neuron(c{self.neuron_id}, {self.source}, "
            f"{len(self.nodes)} nodes, {len(self.edges)} edges)"
        )

    # --- Graph ---
    def graph(self, directed=False):
        """
        Builds the adjacency graph of the neuron. Nodes are location IDs with
        the attributes "xyz" and "radius".

        Parameters
        ----------
        directed : bool, optional
            Indication of whether to orient the graph away from the soma.
            The default is False.

        Returns
        -------
        networkx.Graph or networkx.DiGraph
            Adjacency graph of the neuron.
        """
        graph = nx.Graph(neuron_id=self.neuron_id)
        for i, xyz, radius in zip(
            self.nodes["ID"], self.nodes["XYZum"], self.nodes["Rum"]
        ):
            graph.add_node(i, xyz=np.asarray(xyz), radius=float(radius))
        for i, j in zip(self.edges["A"], self.edges["B"]):
            if i not in graph or j not in graph:
                logger.warning(f"Link to unknown location - {i}, {j}")
            graph.add_edge(i, j)

        if directed:
            return graph_util.to_directed_tree(graph, root=self.get_soma_id())
        return graph

    # --- Soma ---
    def get_soma_id(self):
        """
        Gets the location ID of the soma, which is the annotation with the
        largest radius.

        Returns
        -------
        int or None
            Location ID of the soma, or None if there are no annotations.
        """
        if len(self.nodes) == 0:
            return None
        return self.nodes["ID"].iloc[int(np.argmax(self.nodes["Rum"]))]

    def get_soma_size(self):
        if len(self.nodes) == 0:
            return 0.0
        return float(self.nodes["Rum"].max())

    def get_soma_xyz(self):
        if len(self.nodes) == 0:
            return None
        idx = int(np.argmax(self.nodes["Rum"]))
        return np.asarray(self.nodes["XYZum"].iloc[idx], dtype=float)


# --- Helpers ---
def check_columns(table, columns, name):
    missing = [col for col in columns if col not in table.columns]
    if missing:
        raise KeyError(f"Table '{name}' is missing columns - {missing}")


def validate_source(source):
    """
    Expands an abbreviated volume name. Unknown names are returned unchanged.

    Parameters
    ----------
    source : str
        Name or abbreviation of a volume.

    Returns
    -------
    str
        Full name of the volume.
    """
    return SOURCE_ALIASES.get(str(source).lower(), source)


def get_animal(source):
    return SOURCE_ANIMALS.get(validate_source(source), "")


def get_region(source):
    return SOURCE_REGIONS.get(validate_source(source), "")
