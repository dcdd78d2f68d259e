"""Named CORS policies"""
from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware import Middleware

# Methods a browser may send cross-origin without extra permission
SIMPLE_METHODS = ("GET", "HEAD", "POST")


@dataclass(frozen=True)
class CorsPolicy:
    """A named set of origins allowed to read responses cross-origin"""

    name: str
    origins: tuple[str, ...]
    methods: tuple[str, ...] = SIMPLE_METHODS
    headers: tuple[str, ...] = ()

    def allows(self, origin: str) -> bool:
        return origin in self.origins


@dataclass(frozen=True)
class CorsOptions:
    """CORS policies registered at startup, looked up by name; read-only once built"""

    policies: Mapping[str, CorsPolicy] = field(default_factory=lambda: MappingProxyType({}))

    def add_policy(self, name: str, origins: list[str] | tuple[str, ...]) -> "CorsOptions":
        """Options holding one more policy; self is left unchanged"""
        policy = CorsPolicy(name=name, origins=tuple(origins))
        return CorsOptions(policies=MappingProxyType({**self.policies, name: policy}))

    def get_policy(self, name: str) -> CorsPolicy:
        try:
            return self.policies[name]
        except KeyError:
            raise KeyError(f"CORS policy '{name}' is not registered") from None


def cors_middleware(policy: CorsPolicy) -> Middleware:
    """Middleware entry applying one policy to every request"""
    return Middleware(
        CORSMiddleware,
        allow_origins=list(policy.origins),
        allow_methods=list(policy.methods),
        allow_headers=list(policy.headers),
    )
