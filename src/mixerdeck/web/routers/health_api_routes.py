"""Health check endpoints for monitoring service status."""

import logging
import tomllib
from pathlib import Path
from typing import Annotated

from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends

from mixerdeck.config import MixerDeckConfig
from mixerdeck.system.path_resolver import PathResolver
from mixerdeck.web.core.container import Container
from mixerdeck.web.models.audio import utc_timestamp
from mixerdeck.web.models.health import HealthCheckResponse, LivenessProbeResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health")


def get_version(path_resolver: PathResolver) -> str:
    """Get application version from pyproject.toml."""
    try:
        pyproject_path = Path(path_resolver.get_repo_path()) / "pyproject.toml"
        with open(pyproject_path, "rb") as f:
            data = tomllib.load(f)
            return data["project"]["version"]
    except Exception as e:
        logger.warning("Could not read version from pyproject.toml: %s", e)
        return "unknown"


@router.get("/", response_model=HealthCheckResponse)
@inject
async def health_check(
    path_resolver: Annotated[PathResolver, Depends(Provide[Container.path_resolver])],
    config: Annotated[MixerDeckConfig, Depends(Provide[Container.config])],
) -> HealthCheckResponse:
    """Report service health and whether the external tools are installed.

    The service is degraded when either executable is missing.
    """
    tools = {
        "svcl": Path(config.svcl_path).is_file(),
        "getnir": Path(config.getnir_path).is_file(),
    }
    return HealthCheckResponse(
        status="healthy" if all(tools.values()) else "degraded",
        timestamp=utc_timestamp(),
        version=get_version(path_resolver),
        service="mixerdeck",
        tools=tools,
    )


@router.get("/live", response_model=LivenessProbeResponse)
async def liveness_probe() -> LivenessProbeResponse:
    """Liveness probe; answers as long as the process serves requests."""
    return LivenessProbeResponse(status="alive")
