class GraphError(Exception):
    """Base class for rejected graph mutations."""


class InvalidEdge(GraphError):
    pass


class DuplicateNode(GraphError):
    pass


class UnknownNode(GraphError):
    pass


class UnknownEdge(GraphError):
    pass


class RemoteAnalysisError(Exception):
    """Raised by the strict client when the analysis service can't answer."""
