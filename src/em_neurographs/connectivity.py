"""
Code that parses a connectivity graph exported from Tulip (and decoded from
JSON) into a node table and an edge table. Nodes are annotated structures
(cells, synapses) and edges are the links between them.

    Parsing Algorithm:
        1. Decode the export (if given a path)

        2. Build the node table
            a. Enumerate "ID.nodesValues" in order
            b. Parse the cell ID and read the view label of each node

        3. Build the edge table
            a. Enumerate "LinkedStructures.edgesValues" in order
            b. Parse the annotation pairs that each edge connects
            c. Resolve the source and target of each edge to node indices
            d. Read the directionality, loop membership, type and name

        4. Record provenance and check the header counts

Note: An edge may connect more than one pair of annotations. Only the last
      pair is stored in "ParentIDs", the full list is kept in "AllParentIDs".

"""

from dataclasses import dataclass, field
from tqdm import tqdm
from typing import Optional

import json
import logging
import numpy as np
import pandas as pd

from em_neurographs.config import ParserConfig
from em_neurographs.exceptions import FormatError
from em_neurographs.utils import util

logger = logging.getLogger(__name__)

NODE_COLUMNS = ["CellID", "NodeLabel", "NodeUUID"]
EDGE_COLUMNS = [
    "Source",
    "Target",
    "Directional",
    "Loop",
    "EdgeName",
    "ParentIDs",
    "AllParentIDs",
    "EdgeType",
    "EdgeUUID",
]


@dataclass
class ConnectivityData:
    """
    Tables and provenance produced by parsing a connectivity export.

    Attributes
    ----------
    node_table : pandas.DataFrame
        Table with the columns "CellID", "NodeLabel" and "NodeUUID". Row
        order matches the order of the export.
    edge_table : pandas.DataFrame
        Table whose "Source" and "Target" columns are row positions in
        "node_table".
    file_name : str or None
        Name of the file the export originated from.
    parse_date : str
        Time at which the export was parsed.
    num_nodes : int or None
        Number of nodes stated in the header of the export.
    num_edges : int or None
        Number of edges stated in the header of the export.
    contacts : numpy.ndarray
        Node index pairs from "graph.edges", shifted to start at 1.
    """

    node_table: pd.DataFrame
    edge_table: pd.DataFrame
    file_name: Optional[str] = None
    parse_date: str = ""
    num_nodes: Optional[int] = None
    num_edges: Optional[int] = None
    contacts: np.ndarray = field(
        default_factory=lambda: np.zeros((0, 2), dtype=int)
    )

    def counts_match(self):
        """
        Checks whether the header counts agree with the parsed tables.

        Returns
        -------
        bool
            Indication of whether the number of nodes and edges stated in the
            header match the number of parsed rows.
        """
        nodes_ok = self.num_nodes in (None, len(self.node_table))
        edges_ok = self.num_edges in (None, len(self.edge_table))
        return nodes_ok and edges_ok


class ConnectivityParser:
    """
    Class that parses a decoded connectivity export into tables.
    """

    def __init__(self, config=None):
        """
        Initializes a ConnectivityParser object.

        Parameters
        ----------
        config : ParserConfig, optional
            Settings used while parsing. The default is None, in which case
            the default settings are used.

        Returns
        -------
        None
        """
        self.config = config or ParserConfig()

    def parse(self, source):
        """
        Parses a connectivity export.

        Parameters
        ----------
        source : dict or str
            Decoded export or path to a JSON file containing one.

        Returns
        -------
        ConnectivityData
            Node table, edge table and provenance of the export.
        """
        export, path = self.load(source)
        graph = get_field(export, "graph")
        properties = get_field(graph, "properties", "graph")

        # Build tables
        node_table = self.parse_nodes(properties)
        edge_table = self.parse_edges(properties, node_table)

        # Provenance
        data = ConnectivityData(
            node_table=node_table,
            edge_table=edge_table,
            file_name=get_file_name(graph, path),
            parse_date=util.timestamp(),
            num_nodes=graph.get("nodesNumber"),
            num_edges=graph.get("edgesNumber"),
            contacts=get_contacts(graph),
        )
        if not data.counts_match():
            logger.warning(
                "Header counts do not match parsed tables - "
                f"nodes: {data.num_nodes} vs {len(node_table)}, "
                f"edges: {data.num_edges} vs {len(edge_table)}"
            )
        return data

    def load(self, source):
        """
        Loads the decoded export from "source".

        Parameters
        ----------
        source : dict or str
            Decoded export or path to a JSON file containing one.

        Returns
        -------
        dict
            Decoded export.
        str or None
            Path that the export was read from.
        """
        if isinstance(source, dict):
            return source, None
        if util.is_path(source, extension=".json"):
            logger.info(f"Reading connectivity export - {source}")
            try:
                return util.read_json(source), str(source)
            except json.JSONDecodeError as e:
                raise FormatError(
                    f"Export is not valid JSON - {e}",
                    field="graph",
                    key=str(source),
                ) from e
        raise FormatError(
            "Input must be a decoded export or a path to a JSON file - "
            f"type={type(source).__name__}"
        )

    # --- Nodes ---
    def parse_nodes(self, properties):
        """
        Builds the node table.

        Parameters
        ----------
        properties : dict
            "graph.properties" of the export.

        Returns
        -------
        pandas.DataFrame
            Node table.
        """
        cell_ids = get_values(properties, "ID", "nodesValues")
        labels = get_values(properties, "viewLabel", "nodesValues")

        rows = {col: list() for col in NODE_COLUMNS}
        iterator = tqdm(
            cell_ids.items(),
            desc="Parse nodes",
            disable=not self.config.verbose,
        )
        for uuid, cell_id in iterator:
            rows["CellID"].append(util.to_number(cell_id))
            rows["NodeLabel"].append(
                str(get_entry(labels, uuid, "viewLabel.nodesValues"))
            )
            rows["NodeUUID"].append(uuid)
        return pd.DataFrame(rows, columns=NODE_COLUMNS)

    # --- Edges ---
    def parse_edges(self, properties, node_table):
        """
        Builds the edge table.

        Parameters
        ----------
        properties : dict
            "graph.properties" of the export.
        node_table : pandas.DataFrame
            Node table that edge sources and targets are resolved against.

        Returns
        -------
        pandas.DataFrame
            Edge table.
        """
        # Property maps
        linked = get_values(properties, "LinkedStructures", "edgesValues")
        sources = get_values(properties, "Source", "edgesValues")
        targets = get_values(properties, "Target", "edgesValues")
        directional = get_values(properties, "Directional", "edgesValues")
        edge_types = get_values(properties, "edgeType", "edgesValues")
        labels = get_values(properties, "viewLabel", "edgesValues")
        loops = properties.get("IsLoop", dict()).get("edgesValues", dict())
        node_index = NodeIndex(node_table)

        # Main
        rows = {col: list() for col in EDGE_COLUMNS}
        iterator = tqdm(
            linked.items(),
            desc="Parse edges",
            disable=not self.config.verbose,
        )
        for uuid, blob in iterator:
            pairs = parse_linked_structures(
                blob,
                key=uuid,
                segment_delimiter=self.config.segment_delimiter,
                pair_delimiter=self.config.pair_delimiter,
            )

            # Resolve endpoints
            source = node_index.find(
                get_entry(sources, uuid, "Source.edgesValues")
            )
            target = node_index.find(
                get_entry(targets, uuid, "Target.edgesValues")
            )
            if source is None or target is None:
                if not self.config.drop_unresolved_edges:
                    raise FormatError(
                        "Edge endpoint not found in node table",
                        field="Source/Target",
                        key=uuid,
                    )
                logger.warning(f"Dropping unresolved edge - key={uuid}")
                continue

            # Store
            is_dir = get_entry(directional, uuid, "Directional.edgesValues")
            rows["Source"].append(source)
            rows["Target"].append(target)
            rows["Directional"].append(str(is_dir) == "True")
            rows["Loop"].append(uuid in loops)
            rows["EdgeName"].append(
                get_local_name(
                    get_entry(labels, uuid, "viewLabel.edgesValues")
                )
            )
            rows["ParentIDs"].append(list(pairs[-1]))
            rows["AllParentIDs"].append([list(p) for p in pairs])
            rows["EdgeType"].append(
                str(get_entry(edge_types, uuid, "edgeType.edgesValues"))
            )
            rows["EdgeUUID"].append(uuid)

        edge_table = pd.DataFrame(rows, columns=EDGE_COLUMNS)
        edge_table["Source"] = edge_table["Source"].astype(int)
        edge_table["Target"] = edge_table["Target"].astype(int)
        edge_table["Directional"] = edge_table["Directional"].astype(bool)
        edge_table["Loop"] = edge_table["Loop"].astype(bool)
        return edge_table


class NodeIndex:
    """
    Lookup from the identifiers used by edge endpoints to row positions in
    the node table. Endpoints are matched against "CellID" first, then
    against "NodeUUID". The first row wins when a cell ID is repeated.
    """

    def __init__(self, node_table):
        self.by_cell_id = dict()
        for i, cell_id in enumerate(node_table["CellID"]):
            if not np.isnan(cell_id):
                self.by_cell_id.setdefault(cell_id, i)
        self.by_uuid = {
            uuid: i for i, uuid in enumerate(node_table["NodeUUID"])
        }

    def find(self, value):
        cell_id = util.to_number(value)
        if not np.isnan(cell_id) and cell_id in self.by_cell_id:
            return self.by_cell_id[cell_id]
        return self.by_uuid.get(str(value))


# --- Helpers ---
def parse_connectivity(source, config=None):
    """
    Parses a connectivity export into a node table and an edge table.

    Parameters
    ----------
    source : dict or str
        Decoded export or path to a JSON file containing one.
    config : ParserConfig, optional
        Settings used while parsing. The default is None.

    Returns
    -------
    ConnectivityData
        Node table, edge table and provenance of the export.
    """
    return ConnectivityParser(config).parse(source)


def parse_linked_structures(
    blob, key=None, segment_delimiter="   ", pair_delimiter="->"
):
    """
    Parses the "LinkedStructures" value of an edge, which lists the pairs of
    annotation IDs that the edge connects, e.g. "12->34   56->78".

    Parameters
    ----------
    blob : str
        Value to be parsed.
    key : str, optional
        UUID of the edge, used in error messages. The default is None.
    segment_delimiter : str, optional
        Delimiter between pairs. The default is three spaces.
    pair_delimiter : str, optional
        Delimiter between the two IDs of a pair. The default is "->".

    Returns
    -------
    List[Tuple[int]]
        Annotation ID pairs in the order they appear.
    """
    if not isinstance(blob, str):
        raise FormatError(
            "LinkedStructures value must be a string",
            field="LinkedStructures",
            key=key,
        )

    pairs = list()
    for segment in blob.split(segment_delimiter):
        segment = segment.strip()
        if not segment:
            continue

        ids = segment.split(pair_delimiter)
        if len(ids) != 2:
            raise FormatError(
                f"Malformed annotation pair '{segment}'",
                field="LinkedStructures",
                key=key,
            )
        try:
            pairs.append((int(ids[0].strip()), int(ids[1].strip())))
        except ValueError:
            raise FormatError(
                f"Non-numeric annotation pair '{segment}'",
                field="LinkedStructures",
                key=key,
            )

    if not pairs:
        raise FormatError(
            "No annotation pairs", field="LinkedStructures", key=key
        )
    return pairs


def get_local_name(label):
    """
    Gets the display name of an edge from its view label, which is the first
    line of the label.

    Parameters
    ----------
    label : str
        View label of an edge.

    Returns
    -------
    str
        Display name.
    """
    lines = str(label).strip().splitlines()
    return lines[0].strip() if lines else ""


def get_field(obj, name, parent=None):
    if not isinstance(obj, dict) or name not in obj:
        path = f"{parent}.{name}" if parent else name
        raise FormatError(f"Missing field '{path}'", field=path)
    return obj[name]


def get_values(properties, name, kind):
    prop = get_field(properties, name, "graph.properties")
    return get_field(prop, kind, f"graph.properties.{name}")


def get_entry(values, key, field_name):
    if key not in values:
        raise FormatError(
            f"Missing field '{field_name}'", field=field_name, key=key
        )
    return values[key]


def get_file_name(graph, path=None):
    """
    Gets the name of the file that the export originated from. Tulip stores
    attributes as [type, value] pairs.

    Parameters
    ----------
    graph : dict
        "graph" field of the export.
    path : str, optional
        Path that the export was read from. The default is None.

    Returns
    -------
    str or None
        Name of the originating file.
    """
    value = graph.get("attributes", dict()).get("file")
    if isinstance(value, (list, tuple)) and len(value) > 1:
        return str(value[1])
    if isinstance(value, str):
        return value
    return util.get_filename(path) if path else None


def get_contacts(graph):
    edges = graph.get("edges")
    if edges is None or len(edges) == 0:
        return np.zeros((0, 2), dtype=int)
    return np.asarray(edges, dtype=int).reshape(-1, 2) + 1


def get_adjacency_matrix(data, cell_id=None):
    """
    Builds a weighted adjacency matrix over the rows of the node table, where
    the weight is the number of edges between two nodes.

    Parameters
    ----------
    data : ConnectivityData
        Parsed connectivity export.
    cell_id : int, optional
        If provided, only edges that touch a node with this cell ID are
        counted. The default is None.

    Returns
    -------
    numpy.ndarray
        Adjacency matrix with shape (n_nodes, n_nodes). Directional edges
        only set the [source, target] entry.
    """
    n_nodes = len(data.node_table)
    adj_mat = np.zeros((n_nodes, n_nodes), dtype=int)
    edges = data.edge_table
    if cell_id is not None:
        nodes = np.flatnonzero(data.node_table["CellID"] == cell_id)
        if len(nodes) == 0:
            logger.warning(f"Cell not found in node table - CellID={cell_id}")
        touches = edges["Source"].isin(nodes) | edges["Target"].isin(nodes)
        edges = edges[touches]

    for i, j, is_dir in zip(
        edges["Source"], edges["Target"], edges["Directional"]
    ):
        adj_mat[i, j] += 1
        if not is_dir and i != j:
            adj_mat[j, i] += 1
    return adj_mat
