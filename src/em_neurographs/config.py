"""
Configuration classes used to set up the connectivity parser and the SWC
exporter.

"""
from dataclasses import dataclass, field
from typing import Tuple


@dataclass
class ParserConfig:
    """
    Represents configuration settings used while parsing a connectivity
    export.

    Attributes
    ----------
    drop_unresolved_edges : bool, optional
        Indication of whether to drop edges whose source or target does not
        resolve to a node in the node table. If False, such edges raise a
        FormatError. Default is True.
    segment_delimiter : str, optional
        Delimiter between annotation pairs in the "LinkedStructures" blob.
        Default is three spaces.
    pair_delimiter : str, optional
        Delimiter between the two annotation IDs of a pair. Default is "->".
    verbose : bool, optional
        Indication of whether to display progress bars. Default is False.
    """

    drop_unresolved_edges: bool = True
    segment_delimiter: str = "   "
    pair_delimiter: str = "->"
    verbose: bool = False


@dataclass
class SWCConfig:
    """
    Represents configuration settings related to building skeletons and
    writing SWC files.

    Attributes
    ----------
    has_soma : bool, optional
        Indication of whether the root is written with the soma type code
        instead of the fork point code. Default is False.
    original_source : str, optional
        Text written on the "# ORIGINAL_SOURCE" header line.
    scale : Tuple[float], optional
        Values written on the "# SCALE" header line. Default is
        (1.0, 1.0, 1.0).
    shrinkage_correction : Tuple[float], optional
        Values written on the "# SHRINKAGE_CORRECTION" header line. Default
        is (1.0, 1.0, 1.0).
    strict_lookup : bool, optional
        Indication of whether a node missing from the annotation table raises
        an AnnotationLookupError. If False, its radius and coordinate are
        zero-filled and a warning is logged. Default is False.
    version_number : str, optional
        Value written on the "# VERSION_NUMBER" header line. Default is
        "1.0".
    """

    has_soma: bool = False
    original_source: str = "sbfsem tools"
    scale: Tuple[float] = field(default_factory=lambda: (1.0, 1.0, 1.0))
    shrinkage_correction: Tuple[float] = field(
        default_factory=lambda: (1.0, 1.0, 1.0)
    )
    strict_lookup: bool = False
    version_number: str = "1.0"

