"""Routing module."""
from route_creator.routing.definition import RouteDefinition
from route_creator.routing.patterns import compile_pattern, to_host_path, translate_pattern
from route_creator.routing.pipeline import MiddlewarePipeline
from route_creator.routing.registrar import SUPPORTED_METHODS, ApiRouter

__all__ = [
    "ApiRouter",
    "MiddlewarePipeline",
    "RouteDefinition",
    "SUPPORTED_METHODS",
    "compile_pattern",
    "to_host_path",
    "translate_pattern",
]
