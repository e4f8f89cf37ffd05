"""modelspine -- typed attribute coercion and lazy association resolution
for models of remote-service resources.

Usage:
    from modelspine import Model, SchemaBuilder

    class Server(Model):
        schema = (
            SchemaBuilder("server", service=ComputeService)
            .identity("id")
            .attribute("flavor", aliases="flavorRef", squash="id")
            .attribute("created_at", type="timestamp")
            .association("volumes", "volumes", magnitude="many", type="identity")
            .build()
        )

    server = Server(payload, service=compute)
    server.volumes  # resolved through compute.volumes().get(...) on first read
"""

from modelspine.core.errors import (
    AliasCollisionError,
    ModelError,
    SchemaError,
    ServiceUnavailableError,
    UnknownAccessorError,
    UnknownAttributeError,
)
from modelspine.model import (
    EPOCH,
    AttributeType,
    Cardinality,
    Model,
    ReferenceStyle,
    Schema,
    SchemaBuilder,
    cast,
)

__version__ = "0.1.0"

__all__ = [
    "AliasCollisionError",
    "ModelError",
    "SchemaError",
    "ServiceUnavailableError",
    "UnknownAccessorError",
    "UnknownAttributeError",
    "EPOCH",
    "AttributeType",
    "Cardinality",
    "Model",
    "ReferenceStyle",
    "Schema",
    "SchemaBuilder",
    "cast",
    "__version__",
]
