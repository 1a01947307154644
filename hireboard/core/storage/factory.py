"""Build the configured backend."""

from typing import Any

from ...observability.logger import get_logger
from .base import Backend
from .memory_store import MemoryStore
from .simulated import SimulatedNetworkBackend

logger = get_logger(__name__)


def create_backend(config: dict[str, Any]) -> Backend:
    """Create the backend named by ``config["backend"]["kind"]``.

    Args:
        config: Merged configuration dictionary

    Returns:
        Backend, wrapped in the network simulator when ``simulation.enabled``
    """
    backend_cfg = config.get("backend", {}) or {}
    kind = backend_cfg.get("kind", "memory")

    backend: Backend
    if kind == "memory":
        backend = MemoryStore()
    elif kind == "rest":
        from ...integrations.rest_backend import RestBackend

        backend = RestBackend(
            base_url=backend_cfg.get("url"),
            api_key=backend_cfg.get("apikey"),
            timeout=float(backend_cfg.get("timeout", 10.0)),
        )
    else:
        raise ValueError(f"Unknown backend kind: {kind}")

    sim_cfg = config.get("simulation", {}) or {}
    if sim_cfg.get("enabled"):
        backend = SimulatedNetworkBackend(
            backend,
            min_delay=float(sim_cfg.get("mindelay", 0.2)),
            max_delay=float(sim_cfg.get("maxdelay", 1.2)),
            error_rate=float(sim_cfg.get("errorrate", 0.08)),
        )

    logger.info("backend_created", kind=kind, simulated=bool(sim_cfg.get("enabled")))
    return backend
