"""Exception types raised by the graph builder core."""


class GraphBuilderError(Exception):
    """Base class for all graph builder errors."""


class GraphInvariantError(GraphBuilderError):
    """The IR violates a structural invariant the normalizer should guarantee.

    This is a programming error, not a user-input problem: it means the
    normalization/inference contract was bypassed before code generation.
    """


class UnknownTargetError(GraphBuilderError, ValueError):
    """Requested code generation target is not supported."""


class UnknownTemplateError(GraphBuilderError, LookupError):
    """Requested graph template does not exist in the catalog."""


class NodeNotFoundError(GraphBuilderError, KeyError):
    """An editing operation referenced a node id that is not in the graph."""


class EdgeNotFoundError(GraphBuilderError, KeyError):
    """An editing operation referenced an edge id that is not in the graph."""
