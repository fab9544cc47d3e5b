"""
Miscellaneous helper routines.

"""

from datetime import datetime

import json
import os


# --- OS utils ---
def mkdir(path, exist_ok=True):
    """
    Creates a directory at "path".

    Parameters
    ----------
    path : str
        Path of directory to be created.
    exist_ok : bool, optional
        Indication of whether an existing directory is accepted. The default
        is True.

    Returns
    -------
    None

    """
    if not os.path.exists(path):
        os.makedirs(path)
    elif not exist_ok:
        raise FileExistsError(f"Directory already exists - {path}")


def get_filename(path):
    """
    Gets the name of the file located at the given path, minus the extension.

    Parameters
    ----------
    path : str
        Path to file.

    Returns
    -------
    str
        Name of the file, minus the extension.

    """
    name, _ = os.path.splitext(os.path.basename(path))
    return name


def is_path(obj, extension=None):
    """
    Checks whether "obj" is a path, optionally one that ends with
    "extension".

    Parameters
    ----------
    obj : Any
        Object to be checked.
    extension : str, optional
        Extension that the path must end with. The default is None.

    Returns
    -------
    bool
        Indication of whether "obj" is a path.

    """
    if not isinstance(obj, (str, os.PathLike)):
        return False
    path = os.fspath(obj)
    return path.lower().endswith(extension) if extension else True


# --- IO utils ---
def read_json(path):
    """
    Reads JSON file located at the given path.

    Parameters
    ----------
    path : str
        Path to JSON file to be read.

    Returns
    -------
    dict
        Contents of JSON file.

    """
    with open(path, "r") as f:
        return json.load(f)


def read_txt(path):
    """
    Reads txt file located at the given path.

    Parameters
    ----------
    path : str
        Path to txt file to be read.

    Returns
    -------
    List[str]
        Lines of txt file.

    """
    with open(path, "r") as f:
        return f.read().splitlines()


# --- Miscellaneous ---
def timestamp(fmt="%d-%b-%Y %H:%M:%S"):
    return datetime.now().strftime(fmt)


def to_number(value):
    """
    Converts a value read from an export to a float. Values that cannot be
    converted are returned as NaN.

    Parameters
    ----------
    value : Any
        Value to be converted.

    Returns
    -------
    float
        Numeric value or NaN.

    """
    try:
        return float(value)
    except (TypeError, ValueError):
        return float("nan")
