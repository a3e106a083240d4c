# bookinfo/core/headers.py
from typing import Dict, Mapping, MutableMapping

# Tracing (Envoy, OpenTracing, Datadog, W3C, GCP, gRPC, Zipkin B3, SkyWalking) plus
# identity headers. Fixed on purpose: every hop must forward the same set.
HEADERS_TO_PROPAGATE = (
    "x-request-id",
    "x-ot-span-context",
    "x-datadog-trace-id",
    "x-datadog-parent-id",
    "x-datadog-sampling-priority",
    "traceparent",
    "tracestate",
    "x-cloud-trace-context",
    "grpc-trace-bin",
    "x-b3-traceid",
    "x-b3-spanid",
    "x-b3-parentspanid",
    "x-b3-sampled",
    "x-b3-flags",
    "sw8",
    "end-user",
    "user-agent",
    "cookie",
    "authorization",
    "jwt",
)


def extract_headers(inbound: Mapping[str, str]) -> Dict[str, str]:
    """
    Keep only the allow-listed headers that are present and non-empty.
    `inbound` should be case-insensitive (starlette/httpx Headers); values are kept verbatim.
    """
    propagated: Dict[str, str] = {}
    for name in HEADERS_TO_PROPAGATE:
        value = inbound.get(name)
        if value:
            propagated[name] = value
    return propagated


def attach_headers(propagated: Mapping[str, str], outbound: MutableMapping[str, str]) -> MutableMapping[str, str]:
    """Copy propagated headers onto an outbound header mapping (add/overwrite, never merge)."""
    for name, value in propagated.items():
        outbound[name] = value
    return outbound
