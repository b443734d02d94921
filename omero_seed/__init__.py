"""omero-seed: populate an OMERO server in docker compose with test data."""

__version__ = "0.1.0"

from omero_seed.client import ObjectRef, OmeroCli
from omero_seed.config import SeedConfig, load_config
from omero_seed.errors import CommandError, PreflightError, SeedError, ServerNotReady
from omero_seed.populate import Seeder, SeedResult

__all__ = [
    "__version__",
    "ObjectRef",
    "OmeroCli",
    "SeedConfig",
    "load_config",
    "CommandError",
    "PreflightError",
    "SeedError",
    "ServerNotReady",
    "Seeder",
    "SeedResult",
]
