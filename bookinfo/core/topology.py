# bookinfo/core/topology.py
import logging
from typing import Dict

from pydantic import HttpUrl, TypeAdapter, ValidationError

from bookinfo.core.config import Settings
from bookinfo.core.errors import TopologyError
from bookinfo.domain.models.topology import ServiceNode

logger = logging.getLogger(__name__)

PRODUCTPAGE = "productpage"
DETAILS = "details"
REVIEWS = "reviews"
RATINGS = "ratings"

_url_adapter = TypeAdapter(HttpUrl)


def _domain_suffix(domain: str) -> str:
    if not domain:
        return ""
    return domain if domain.startswith(".") else f".{domain}"


def service_url(host: str, port: int, domain: str = "") -> str:
    """
    Compose http://{host}{domain}:{port} and validate it.
    Raises TopologyError on a malformed result; callers run this at startup only.
    """
    url = f"http://{host}{_domain_suffix(domain)}:{port}"
    try:
        _url_adapter.validate_python(url)
    except ValidationError as e:
        raise TopologyError(f"invalid service URL {url!r}: {e.errors()[0]['msg']}") from e
    return url


def build_topology(settings: Settings) -> ServiceNode:
    """
    productpage -> {details, reviews -> ratings}, resolved from the environment once.
    """
    domain = settings.SERVICES_DOMAIN

    details = ServiceNode(
        name=DETAILS,
        base_url=service_url(settings.DETAILS_HOSTNAME, settings.DETAILS_SERVICE_PORT, domain),
    )
    ratings = ServiceNode(
        name=RATINGS,
        base_url=service_url(settings.RATINGS_HOSTNAME, settings.RATINGS_SERVICE_PORT, domain),
    )
    reviews = ServiceNode(
        name=REVIEWS,
        base_url=service_url(settings.REVIEWS_HOSTNAME, settings.REVIEWS_SERVICE_PORT, domain),
        children=(ratings,),
    )
    root = ServiceNode(
        name=PRODUCTPAGE,
        base_url=service_url(settings.PRODUCTPAGE_HOSTNAME, settings.PRODUCTPAGE_SERVICE_PORT, domain),
        children=(details, reviews),
    )
    logger.debug("topology built: %s", {n.name: n.base_url for n in root.walk()})
    return root


def flatten_topology(root: ServiceNode) -> Dict[str, ServiceNode]:
    """Name -> node registry; names are unique within the tree."""
    registry: Dict[str, ServiceNode] = {}
    for node in root.walk():
        if node.name in registry:
            raise TopologyError(f"duplicate service name in topology: {node.name}")
        registry[node.name] = node
    return registry
