"""
Conventional routing

A route pattern such as `{controller=Home}/{action=Index}/{id?}` is expanded
into every concrete path that reaches a given controller action. Trailing
segments may be left out when they are optional or when the action's value
equals the segment default, so Home.Index answers on `/`, `/Home` and
`/Home/Index`.
"""
import re
from collections.abc import Callable, Collection, Sequence
from dataclasses import dataclass
from typing import Any

from fastapi import APIRouter

DEFAULT_ROUTE_PATTERN = "{controller=Home}/{action=Index}/{id?}"

_SEGMENT_RE = re.compile(r"^\{(?P<name>\w+)(?:=(?P<default>[^{}?]+)|(?P<optional>\?))?\}$")


@dataclass(frozen=True)
class RouteSegment:
    """One `{name}`, `{name=default}` or `{name?}` segment"""

    name: str
    default: str | None = None
    optional: bool = False

    def omittable_for(self, value: str | None) -> bool:
        if self.optional:
            return True
        return self.default is not None and value is not None and self.default.lower() == value.lower()


def parse_route_pattern(pattern: str) -> tuple[RouteSegment, ...]:
    """Parse a route pattern into its segments"""
    segments = []
    for part in pattern.strip("/").split("/"):
        match = _SEGMENT_RE.match(part)
        if match is None:
            raise ValueError(f"Unsupported route segment {part!r} in pattern {pattern!r}")
        segments.append(
            RouteSegment(
                name=match.group("name"),
                default=match.group("default"),
                optional=match.group("optional") is not None,
            )
        )
    return tuple(segments)


def expand_route_paths(
    pattern: str,
    controller: str,
    action: str,
    path_params: Collection[str] = (),
) -> list[str]:
    """
    All paths under `pattern` that dispatch to `controller`.`action`.

    `path_params` names the optional segments the action accepts as path
    parameters. The canonical (longest) path comes first.
    """
    segments = parse_route_pattern(pattern)
    values = {"controller": controller, "action": action}

    parts: list[str] = []
    for segment in segments:
        if segment.name in values:
            parts.append(values[segment.name])
        elif segment.name in path_params:
            parts.append(f"{{{segment.name}}}")
        elif segment.optional:
            break
        else:
            raise ValueError(f"No value for required route segment '{segment.name}'")

    paths = []
    for keep in range(len(parts), -1, -1):
        omitted = segments[keep:len(parts)]
        if not all(segment.omittable_for(values.get(segment.name)) for segment in omitted):
            break
        paths.append("/" + "/".join(parts[:keep]))
    return paths


class ControllerRouter(APIRouter):
    """APIRouter whose actions are registered on conventional-route paths"""

    def __init__(self, controller: str, pattern: str = DEFAULT_ROUTE_PATTERN, **kwargs: Any) -> None:
        kwargs.setdefault("tags", [controller])
        super().__init__(**kwargs)
        self.controller = controller
        self.pattern = pattern

    def action(
        self,
        name: str,
        methods: Sequence[str] = ("GET",),
        path_params: Collection[str] = (),
        **kwargs: Any,
    ) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        """Register the decorated endpoint as `controller.name`"""

        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            paths = expand_route_paths(self.pattern, self.controller, name, path_params)
            for index, path in enumerate(paths):
                self.add_api_route(
                    path,
                    func,
                    methods=list(methods),
                    name=f"{self.controller}.{name}",
                    include_in_schema=index == 0,
                    **kwargs,
                )
            return func

        return decorator
