"""em-neurographs package.

Parses connectivity graphs exported from serial-EM annotation volumes and
exports single neurons as SWC skeletons.
"""

from em_neurographs.connectivity import (
    ConnectivityData,
    ConnectivityParser,
    get_adjacency_matrix,
    parse_connectivity,
)
from em_neurographs.exceptions import (
    AnnotationLookupError,
    FormatError,
    GraphError,
)
from em_neurographs.neuron import Neuron
from em_neurographs.skeleton import SkeletonBuilder, SWCWriter, export_swc

__all__ = [
    "AnnotationLookupError",
    "ConnectivityData",
    "ConnectivityParser",
    "FormatError",
    "GraphError",
    "Neuron",
    "SkeletonBuilder",
    "SWCWriter",
    "export_swc",
    "get_adjacency_matrix",
    "parse_connectivity",
    "__version__",
]

__version__ = "0.1.0"
