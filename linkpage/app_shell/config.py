import logging
import os
from collections.abc import Iterable, Mapping

from linkpage.domain.routes import RESERVED_SLUGS, uncovered_segments
from linkpage.rules.models import Rules

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Startup configuration is unusable; the process must not serve."""


def validate_ops_rules(rules: Rules, environ: Mapping[str, str] | None = None) -> None:
    """
    Validate operational requirements before startup.
    """
    env = os.environ if environ is None else environ

    missing = [name for name in rules.ops.required_env if not env.get(name)]
    if missing:
        raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    logger.info("Configuration validated")


def validate_route_reservations(
    paths: Iterable[str], reserved: Iterable[str] = RESERVED_SLUGS
) -> None:
    """
    Every literal first segment of a mounted route must be a reserved slug,
    otherwise a page could be created that the router would shadow.
    """
    missing = uncovered_segments(paths, reserved)
    if missing:
        raise ConfigError(
            "Mounted routes claim segments missing from RESERVED_SLUGS: " + ", ".join(missing)
        )
