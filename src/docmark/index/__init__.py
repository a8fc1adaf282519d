"""Documentation index exports."""

from docmark.index.encoder import (
    documentation_key,
    encode,
    signature_key,
    type_key,
)
from docmark.index.nodes import (
    DocumentationNode,
    is_deferred,
    param_node,
    section,
)
from docmark.index.resolver import InheritanceResolver
from docmark.index.store import (
    DocumentationIndex,
    DocumentationRegistry,
    IndexState,
)

__all__ = [
    # Encoder
    "documentation_key",
    "encode",
    "signature_key",
    "type_key",
    # Nodes
    "DocumentationNode",
    "is_deferred",
    "param_node",
    "section",
    # Index
    "DocumentationIndex",
    "DocumentationRegistry",
    "IndexState",
    # Resolver
    "InheritanceResolver",
]
