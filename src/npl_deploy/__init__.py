# Load .env vars from file before everything else
from dotenv import load_dotenv

load_dotenv()

from .logger import setup_logging  # noqa: E402

setup_logging()

# TYPE_CHECKING imports provide full IDE support (autocomplete, type hints)
# while __getattr__ enables lazy loading at runtime for fast CLI startup
from typing import TYPE_CHECKING  # noqa: E402

if TYPE_CHECKING:
    from .build.archive import Archive, ArchiveBuilder
    from .core.models import DeploymentConfig, DeploymentResult, DeploymentStatus
    from .deployment import DeploymentOrchestrator, RapidDeployChoice


def __getattr__(name):
    """Lazily import core modules only when accessed."""
    if name in ("Archive", "ArchiveBuilder"):
        from .build import archive

        return getattr(archive, name)
    elif name in ("DeploymentConfig", "DeploymentResult", "DeploymentStatus"):
        from .core import models

        return getattr(models, name)
    elif name in ("DeploymentOrchestrator", "RapidDeployChoice"):
        from . import deployment

        return getattr(deployment, name)
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "Archive",
    "ArchiveBuilder",
    "DeploymentConfig",
    "DeploymentOrchestrator",
    "DeploymentResult",
    "DeploymentStatus",
    "RapidDeployChoice",
]
