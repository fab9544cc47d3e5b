"""
Routines for working with the adjacency graph of a single neuron. Nodes are
annotation IDs and edges are the structural links between annotations.

    Tree Preparation:
        1. Orient the graph away from the root (if undirected)
        2. Check that every node has an in-degree of at most 1
        3. Check that there is exactly one node with an in-degree of 0

Note: The checks in steps 2 and 3 are global and are evaluated before any
      traversal of the tree begins.

"""

import logging

import networkx as nx

from em_neurographs.exceptions import GraphError

logger = logging.getLogger(__name__)


def to_directed_tree(graph, root=None):
    """
    Converts the given graph to a directed graph whose edges point away from
    the root. Directed graphs are returned unchanged.

    Parameters
    ----------
    graph : networkx.Graph or networkx.DiGraph
        Adjacency graph of a neuron.
    root : hashable, optional
        Node that the undirected graph is oriented away from. The default is
        None, in which case the node with the largest "radius" attribute is
        used.

    Returns
    -------
    networkx.DiGraph
        Directed graph containing every node of "graph".
    """
    if graph.is_directed():
        return graph

    # Check for cycles
    if cycle_exists(graph):
        raise GraphError("non-tree structure", nx.find_cycle(graph))

    # Orient edges
    root = find_root_candidate(graph) if root is None else root
    if root is not None and root not in graph:
        raise GraphError("root not in graph", [root])
    digraph = nx.DiGraph(**graph.graph)
    digraph.add_nodes_from(graph.nodes(data=True))
    if root is not None:
        digraph.add_edges_from(nx.bfs_edges(graph, root))
    return digraph


def check_tree(digraph):
    """
    Checks that the given directed graph is a tree, then returns its root. The
    in-degree check runs first so that merges are reported as such.

    Parameters
    ----------
    digraph : networkx.DiGraph
        Directed graph to be checked.

    Returns
    -------
    hashable
        Root of the tree, which is the unique node with in-degree 0.
    """
    in_degree = dict(digraph.in_degree())
    violators = [i for i, d in in_degree.items() if d > 1]
    if violators:
        raise GraphError("non-tree structure", violators)

    roots = [i for i, d in in_degree.items() if d == 0]
    if len(roots) != 1:
        raise GraphError("multiple or zero roots", roots)

    # Cycles detached from the root
    if cycle_exists(digraph):
        raise GraphError("non-tree structure", nx.find_cycle(digraph))
    return roots[0]


def find_root_candidate(graph):
    """
    Finds the node with the largest radius, which is taken to be the soma.
    Ties are broken by iteration order.

    Parameters
    ----------
    graph : networkx.Graph
        Graph to be searched.

    Returns
    -------
    hashable or None
        Node with the largest radius, or None if the graph is empty.
    """
    best_node, best_radius = None, -float("inf")
    for i, radius in graph.nodes(data="radius", default=0.0):
        if radius > best_radius:
            best_node, best_radius = i, radius
    return best_node


def cycle_exists(graph):
    """
    Checks if the given graph has a cycle.

    Paramaters
    ----------
    graph : networkx.Graph
        Graph to be searched.

    Returns
    -------
    bool
        Indication of whether graph has a cycle.
    """
    try:
        nx.find_cycle(graph)
        return True
    except nx.exception.NetworkXNoCycle:
        return False


def get_leafs(digraph):
    """
    Gets leaf nodes of a directed tree.

    Parameters
    ----------
    digraph : networkx.DiGraph
        Graph to be searched

    Returns
    -------
    List[hashable]
        Nodes without successors.
    """
    return [i for i in digraph.nodes if digraph.out_degree[i] == 0]
