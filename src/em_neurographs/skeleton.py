"""
Code that builds a skeleton from the adjacency graph of a neuron, then writes
the skeleton to an SWC file.

    Skeleton Building Algorithm:
        1. Orient the graph away from the soma (if undirected)

        2. Check the tree invariants
            a. No node has an in-degree greater than 1
            b. Exactly one node has an in-degree of 0 (the root)

        3. Classify nodes with a depth-first, pre-order walk from the root
            a. Child with 0 children -> end point
            b. Child with 1 child -> dendrite
            c. Child with 2+ children -> fork point

        4. Look up the radius and coordinate of each node

Note: Records are stored in traversal order, so the parent of a record is
      always written before the record itself.

"""

from math import pi

import logging
import numpy as np
import os
import pandas as pd

from em_neurographs import neuron as neuron_util
from em_neurographs.config import SWCConfig
from em_neurographs.exceptions import AnnotationLookupError
from em_neurographs.utils import graph_util, swc_util

logger = logging.getLogger(__name__)


class SkeletonBuilder:
    """
    Class that builds a skeleton table from the adjacency graph of a neuron
    and its annotation table.
    """

    def __init__(self, graph, nodes, config=None, root=None):
        """
        Initializes a SkeletonBuilder object.

        Parameters
        ----------
        graph : networkx.Graph or networkx.DiGraph
            Adjacency graph whose nodes are location IDs.
        nodes : pandas.DataFrame
            Annotation table with the columns "ID", "XYZum" and "Rum".
        config : SWCConfig, optional
            Settings used to build the skeleton. The default is None.
        root : hashable, optional
            Node that an undirected graph is oriented away from. The default
            is None.

        Returns
        -------
        None
        """
        self.config = config or SWCConfig()
        self.graph = graph
        self.nodes = nodes
        self.root = root
        self.n_missing = 0

    @classmethod
    def from_neuron(cls, neuron, config=None):
        return cls(
            neuron.graph(directed=False),
            neuron.nodes,
            config=config,
            root=neuron.get_soma_id(),
        )

    def build(self):
        """
        Builds the skeleton table.

        Returns
        -------
        pandas.DataFrame
            Skeleton table with the columns "ID", "SWC", "XYZ", "Radius" and
            "Parent", one row per node in traversal order. "Parent" is the
            1-based row position of the parent, or -1 for the root.
        """
        digraph = graph_util.to_directed_tree(self.graph, root=self.root)
        root = graph_util.check_tree(digraph)

        # Classify nodes
        root_type = swc_util.SOMA if self.config.has_soma else None
        order, swc_types, parents = classify(digraph, root, root_type)

        # Assemble table
        idx = {i: cnt + 1 for cnt, i in enumerate(order)}
        skeleton = pd.DataFrame(
            {
                "ID": order,
                "SWC": [swc_types[i] for i in order],
                "XYZ": [np.zeros(3) for _ in order],
                "Radius": np.zeros(len(order)),
                "Parent": [
                    idx[parents[i]] if parents[i] is not None
                    else swc_util.NO_PARENT
                    for i in order
                ],
            }
        )
        self.assign_attributes(skeleton)
        return skeleton

    def assign_attributes(self, skeleton):
        """
        Copies the radius and coordinate of each node from the annotation
        table into the skeleton table.

        Parameters
        ----------
        skeleton : pandas.DataFrame
            Skeleton table to be updated in place.

        Returns
        -------
        None
        """
        lookup = dict()
        for i, xyz, radius in zip(
            self.nodes["ID"], self.nodes["XYZum"], self.nodes["Rum"]
        ):
            lookup.setdefault(i, (xyz, radius))

        self.n_missing = 0
        xyz_list, radius_list = list(), list()
        for i in skeleton["ID"]:
            if i in lookup:
                xyz, radius = lookup[i]
                xyz_list.append(np.asarray(xyz, dtype=float))
                radius_list.append(float(radius))
            elif self.config.strict_lookup:
                raise AnnotationLookupError(i)
            else:
                logger.warning(f"Annotation not found, zero-filling - ID={i}")
                self.n_missing += 1
                xyz_list.append(np.zeros(3))
                radius_list.append(0.0)

        skeleton["XYZ"] = xyz_list
        skeleton["Radius"] = radius_list
        if self.n_missing:
            logger.warning(f"{self.n_missing} annotation(s) zero-filled")


class SWCWriter:
    """
    Class that writes the skeleton of a neuron to an SWC file.
    """

    def __init__(self, neuron, config=None):
        """
        Initializes a SWCWriter object.

        Parameters
        ----------
        neuron : Neuron
            Neuron to be written.
        config : SWCConfig, optional
            Settings used to build and write the skeleton. The default is
            None.

        Returns
        -------
        None
        """
        self.config = config or SWCConfig()
        self.neuron = neuron
        self.builder = SkeletonBuilder.from_neuron(neuron, config=self.config)
        self.skeleton = None

    @property
    def filename(self):
        return f"c{self.neuron.neuron_id}.swc"

    def go(self):
        logger.info("Creating SWC node table...")
        self.skeleton = self.builder.build()
        return self.skeleton

    def save(self, out_dir):
        """
        Builds the skeleton (if needed) and writes it to "out_dir".

        Parameters
        ----------
        out_dir : str
            Directory that the SWC file is written to.

        Returns
        -------
        str
            Path of the SWC file.
        """
        if self.skeleton is None:
            self.go()

        path = os.path.join(out_dir, self.filename)
        write_skeleton(path, self.skeleton, self.make_header())
        logger.info(f"Saved as {path}")
        return path

    def make_header(self):
        soma_radius = self.neuron.get_soma_size()
        return swc_util.make_header(
            creature=neuron_util.get_animal(self.neuron.source),
            region=neuron_util.get_region(self.neuron.source),
            soma_area=pi * soma_radius ** 2,
            original_source=self.config.original_source,
            shrinkage_correction=self.config.shrinkage_correction,
            scale=self.config.scale,
            version_number=self.config.version_number,
        )


# --- Helpers ---
def classify(digraph, root, root_type=None):
    """
    Assigns a parent and an SWC type to every node of a directed tree by
    walking it depth-first in pre-order with an explicit stack.

    Parameters
    ----------
    digraph : networkx.DiGraph
        Directed tree.
    root : hashable
        Root of the tree.
    root_type : int, optional
        Type code assigned to the root. The default is None, in which case
        the fork point code is used.

    Returns
    -------
    List[hashable]
        Nodes in traversal order, starting with the root.
    dict
        Type code of each node. Nodes not reached keep the undefined code.
    dict
        Parent of each node. The root and nodes not reached map to None.
    """
    swc_types = {i: swc_util.UNDEFINED for i in digraph.nodes}
    parents = {i: None for i in digraph.nodes}
    swc_types[root] = swc_util.FORK_POINT if root_type is None else root_type

    order = [root]
    children = list(digraph.successors(root))
    if len(children) == 0:
        logger.info(f"No child nodes for base node {root}")
        return order, swc_types, parents

    queue = [(j, root) for j in reversed(children)]
    while queue:
        i, parent = queue.pop()
        parents[i] = parent
        order.append(i)

        children = list(digraph.successors(i))
        if len(children) == 0:
            swc_types[i] = swc_util.END_POINT
        elif len(children) == 1:
            swc_types[i] = swc_util.DENDRITE
        else:
            swc_types[i] = swc_util.FORK_POINT
        queue.extend((j, i) for j in reversed(children))
    return order, swc_types, parents


def to_entries(skeleton):
    """
    Converts a skeleton table to SWC entries.

    Parameters
    ----------
    skeleton : pandas.DataFrame
        Skeleton table built by a SkeletonBuilder.

    Returns
    -------
    List[str]
        Entries to be written to an SWC file.
    """
    entry_list = list()
    iterator = zip(
        skeleton["SWC"], skeleton["XYZ"], skeleton["Radius"], skeleton["Parent"]
    )
    for cnt, (swc_type, xyz, radius, parent) in enumerate(iterator):
        entry_list.append(
            swc_util.make_entry(cnt + 1, swc_type, xyz, radius, parent)
        )
    return entry_list


def write_skeleton(path, skeleton, header=None):
    """
    Writes a skeleton table to an SWC file.

    Parameters
    ----------
    path : str
        Path that the SWC file is written to.
    skeleton : pandas.DataFrame
        Skeleton table built by a SkeletonBuilder.
    header : List[str], optional
        Header lines. The default is None, in which case a default header is
        used.

    Returns
    -------
    None
    """
    header = swc_util.make_header() if header is None else header
    swc_util.write(path, header, to_entries(skeleton))


def export_swc(neuron, out_dir, config=None):
    """
    Builds the skeleton of a neuron and writes it to "c{neuron_id}.swc" in
    "out_dir".

    Parameters
    ----------
    neuron : Neuron
        Neuron to be exported.
    out_dir : str
        Directory that the SWC file is written to.
    config : SWCConfig, optional
        Settings used to build and write the skeleton. The default is None.

    Returns
    -------
    str
        Path of the SWC file.
    """
    return SWCWriter(neuron, config=config).save(out_dir)
