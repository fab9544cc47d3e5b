"""Command-line interface for em-neurographs.

Provides utilities to:
  * Parse a connectivity export into node and edge tables (CSV)
  * Export a neuron, given as annotation and link tables (CSV), to SWC

Usage (after install):

    python -m em_neurographs --help
    em-neurographs --help
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List

import pandas as pd

from em_neurographs import __version__
from em_neurographs.config import ParserConfig, SWCConfig
from em_neurographs.connectivity import parse_connectivity
from em_neurographs.exceptions import AnnotationLookupError, FormatError, GraphError
from em_neurographs.neuron import Neuron
from em_neurographs.skeleton import export_swc
from em_neurographs.utils import util

logger = logging.getLogger(__name__)


def cmd_parse_connectivity(args: argparse.Namespace) -> int:
    config = ParserConfig(
        drop_unresolved_edges=not args.strict, verbose=args.verbose
    )
    try:
        data = parse_connectivity(args.export, config=config)
    except FormatError as e:
        print(f"ERROR parsing {args.export}: {e}", file=sys.stderr)
        return 1

    print(f"File: {data.file_name}")
    print(f"Nodes: {len(data.node_table)} (header: {data.num_nodes})")
    print(f"Edges: {len(data.edge_table)} (header: {data.num_edges})")
    if args.out_dir:
        util.mkdir(args.out_dir)
        data.node_table.to_csv(os.path.join(args.out_dir, "nodes.csv"), index=False)
        data.edge_table.to_csv(os.path.join(args.out_dir, "edges.csv"), index=False)
        print(f"Wrote tables to {args.out_dir}")
    return 0


def read_neuron(nodes_path: str, edges_path: str, neuron_id: int, source: str) -> Neuron:
    """Read a neuron from CSV tables with the columns ID,X,Y,Z,R and A,B."""
    nodes = pd.read_csv(nodes_path)
    edges = pd.read_csv(edges_path)
    return Neuron.from_arrays(
        neuron_id,
        source,
        nodes["ID"].tolist(),
        nodes[["X", "Y", "Z"]].to_numpy(),
        nodes["R"].to_numpy(),
        links=zip(edges["A"].tolist(), edges["B"].tolist()),
    )


def cmd_swc(args: argparse.Namespace) -> int:
    config = SWCConfig(has_soma=args.has_soma, strict_lookup=args.strict)
    try:
        neuron = read_neuron(args.nodes, args.edges, args.neuron_id, args.source)
        path = export_swc(neuron, args.out_dir, config=config)
    except (AnnotationLookupError, FileNotFoundError, GraphError, KeyError) as e:
        print(f"ERROR building skeleton for c{args.neuron_id}: {e}", file=sys.stderr)
        return 1
    print(f"Wrote {path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="em-neurographs", description="Connectivity and skeleton utilities")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="store_true", help="Log progress")
    sub = p.add_subparsers(dest="command", required=True)

    # parse-connectivity
    parse_p = sub.add_parser("parse-connectivity", help="Parse a connectivity export (JSON)")
    parse_p.add_argument("export", help="Path to JSON export")
    parse_p.add_argument("--out-dir", help="Directory to write nodes.csv and edges.csv to")
    parse_p.add_argument("--strict", action="store_true", help="Fail on unresolved edges instead of dropping them")
    parse_p.set_defaults(func=cmd_parse_connectivity)

    # swc
    swc_p = sub.add_parser("swc", help="Export a neuron to SWC")
    swc_p.add_argument("nodes", help="CSV with the columns ID,X,Y,Z,R")
    swc_p.add_argument("edges", help="CSV with the columns A,B")
    swc_p.add_argument("--neuron-id", type=int, required=True)
    swc_p.add_argument("--source", required=True, help="Volume name or abbreviation")
    swc_p.add_argument("--out-dir", default=".", help="Output directory (default: %(default)s)")
    swc_p.add_argument("--has-soma", action="store_true", help="Write the root with the soma type code")
    swc_p.add_argument("--strict", action="store_true", help="Fail on annotations missing from the node table")
    swc_p.set_defaults(func=cmd_swc)

    return p


def main(argv: List[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
