"""Descriptor catalog: definitions and the built-in descriptor families."""

from symfeat.catalog.definition import VARIABLE, DescriptorCatalog, DescriptorDefinition, Variant
from symfeat.catalog.registry import build_default_catalog, resolve_selection

__all__ = [
    'VARIABLE',
    'Variant',
    'DescriptorDefinition',
    'DescriptorCatalog',
    'build_default_catalog',
    'resolve_selection',
]
