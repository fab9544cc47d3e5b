"""
Routines for working with SWC files. An SWC file is a text-based file format
used to represent the directed graphical structure of a neuron. It contains a
header of commented lines followed by a series of nodes such that each has
the following attributes:
    "id" (int): node ID, increments by one from one line to the next
    "type" (int): node type (e.g. soma, axon, dendrite)
    "x" (float): x coordinate
    "y" (float): y coordinate
    "z" (float): z coordinate
    "radius" (float): radius at the node
    "pid" (int): node ID of parent, or -1 for the root

Note: Each uncommented line in an SWC file corresponds to a node and contains
      these attributes in the same order.
"""

from datetime import date

import numpy as np
import os

from em_neurographs.utils import util

# Type codes
UNDEFINED = 0
SOMA = 1
AXON = 2
DENDRITE = 3
APICAL_DENDRITE = 4
FORK_POINT = 5
END_POINT = 6
CUSTOM = 7

NO_PARENT = -1


# --- Write ---
def make_header(
    creature="",
    region="",
    soma_area=0.0,
    original_source="sbfsem tools",
    shrinkage_correction=(1.0, 1.0, 1.0),
    scale=(1.0, 1.0, 1.0),
    version_number="1.0",
    version_date=None,
):
    """
    Makes the metadata lines written at the top of an SWC file.

    Parameters
    ----------
    creature : str, optional
        Species the neuron was reconstructed from.
    region : str, optional
        Anatomical region of the volume.
    soma_area : float, optional
        Cross-sectional area of the soma.
    original_source : str, optional
        Name of the software that produced the file.
    shrinkage_correction : Tuple[float], optional
        Shrinkage correction factors. The default is (1.0, 1.0, 1.0).
    scale : Tuple[float], optional
        Scaling factors. The default is (1.0, 1.0, 1.0).
    version_number : str, optional
        Version of the file. The default is "1.0".
    version_date : datetime.date, optional
        Date of the version. The default is None, in which case today's date
        is used.

    Returns
    -------
    List[str]
        Header lines, without trailing newlines. The last line is blank.
    """
    version_date = version_date or date.today()
    return [
        f"# ORIGINAL_SOURCE {original_source}",
        f"# CREATURE {creature}",
        f"# REGION {region}" if region else "# REGION",
        "# FIELD/LAYER",
        "# TYPE",
        "# CONTRIBUTOR",
        "# REFERENCE",
        "# RAW",
        "# EXTRAS",
        "# SOMA_AREA %.3f" % soma_area,
        "# SHRINKAGE_CORRECTION " + " ".join(map(str, shrinkage_correction)),
        f"# VERSION_NUMBER {version_number}",
        f"# VERSION_DATE {version_date.strftime('%Y-%m-%d')}",
        "# SCALE " + " ".join(map(str, scale)),
        "",
    ]


def make_entry(node_id, swc_type, xyz, radius, parent):
    """
    Makes a single data line of an SWC file. X and Y are written with 4
    decimal places, Z with 2 and the radius with 4.

    Parameters
    ----------
    node_id : int
        Sequential index of the node, starting at 1.
    swc_type : int
        Type code of the node.
    xyz : ArrayLike
        Coordinate of the node.
    radius : float
        Radius of the node.
    parent : int
        Sequential index of the parent, or -1 for the root.

    Returns
    -------
    str
        Entry to be written in an SWC file.
    """
    x, y, z = (float(v) for v in xyz)
    return "%d %d %.4f %.4f %.2f %.4f %d" % (
        node_id, swc_type, x, y, z, float(radius), parent
    )


def write(path, header, entry_list):
    """
    Writes an SWC file. The directory that "path" points into must already
    exist.

    Parameters
    ----------
    path : str
        Path that SWC file will be written to.
    header : List[str]
        Header lines to be written before the entries.
    entry_list : List[str]
        Entries to be written to the SWC file.

    Returns
    -------
    None
    """
    dirname = os.path.dirname(os.path.abspath(path))
    if not os.path.isdir(dirname):
        raise FileNotFoundError(f"Output directory does not exist - {dirname}")

    with open(path, "w") as f:
        for line in header:
            f.write(line + "\n")
        for entry in entry_list:
            f.write(entry + "\n")


# --- Read ---
def read(path):
    """
    Reads an SWC file stored on the local machine.

    Parameters
    ----------
    path : str
        Path to SWC file.

    Returns
    -------
    dict
        Dictionary whose keys and values are the attribute names and values
        from the SWC file, plus "swc_name" and "header".
    """
    swc_dict = parse(util.read_txt(path))
    swc_dict["swc_name"] = util.get_filename(path)
    return swc_dict


def parse(content):
    """
    Parses the lines of an SWC file.

    Parameters
    ----------
    content : List[str]
        List of strings such that each is a line from an SWC file.

    Returns
    -------
    dict
        Dictionaries whose keys and values are the attribute names and values
        from an SWC file.
    """
    header = [line for line in content if line.startswith("#")]
    content = [
        line for line in content if line.strip() and not line.startswith("#")
    ]
    swc_dict = {
        "id": np.zeros((len(content)), dtype=int),
        "type": np.zeros((len(content)), dtype=int),
        "xyz": np.zeros((len(content), 3), dtype=np.float64),
        "radius": np.zeros((len(content)), dtype=np.float64),
        "pid": np.zeros((len(content)), dtype=int),
        "header": header,
    }
    for i, line in enumerate(content):
        parts = line.split()
        swc_dict["id"][i] = int(parts[0])
        swc_dict["type"][i] = int(parts[1])
        swc_dict["xyz"][i] = [float(v) for v in parts[2:5]]
        swc_dict["radius"][i] = float(parts[5])
        swc_dict["pid"][i] = int(parts[6])
    return swc_dict
