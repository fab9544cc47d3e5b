"""
Exceptions raised while parsing connectivity exports and building skeletons.

"""


class FormatError(ValueError):
    """
    Raised when a connectivity export is malformed or incomplete.

    Attributes
    ----------
    field : str or None
        Name of the offending field of the export.
    key : str or None
        UUID of the node or edge whose entry is malformed.
    """

    def __init__(self, message, field=None, key=None):
        self.field = field
        self.key = key
        if key is not None:
            message = f"{message} - key={key}"
        super().__init__(message)


class GraphError(ValueError):
    """
    Raised when a neuron graph violates the tree invariants (exactly one root,
    in-degree at most 1).

    Attributes
    ----------
    nodes : List
        Nodes that violate the invariant.
    """

    def __init__(self, message, nodes=()):
        self.nodes = list(nodes)
        if self.nodes:
            message = f"{message} - nodes={self.nodes}"
        super().__init__(message)


class AnnotationLookupError(LookupError):
    """
    Raised in strict mode when a skeleton node is missing from the annotation
    table.
    """

    def __init__(self, annotation_id):
        self.annotation_id = annotation_id
        super().__init__(f"Annotation not found - ID={annotation_id}")
