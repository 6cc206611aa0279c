"""Built-in descriptor catalog and selection helpers."""

import logging
from typing import Optional, Sequence

from symfeat.catalog import change, dynamics, instrumentation, melodic, notation, pitch, rhythm, texture
from symfeat.catalog.definition import DescriptorCatalog, Variant
from symfeat.contracts.failure import ConfigurationError

__all__ = ['build_default_catalog', 'resolve_selection']

logger = logging.getLogger(__name__)

# Family order is catalog order, which is also the plan tie-break order.
_FAMILIES = (pitch, melodic, rhythm, texture, instrumentation, dynamics, change, notation)


def build_default_catalog() -> DescriptorCatalog:
    """Catalog of every built-in descriptor."""
    definitions = []
    for family in _FAMILIES:
        definitions.extend(family.DESCRIPTORS)
    return DescriptorCatalog(definitions)


def resolve_selection(catalog: DescriptorCatalog, selected: Optional[Sequence[str]] = None,
                      input_kind: str = "any") -> list:
    """Turn a configured descriptor selection into the save vector.

    Parameters
    ----------
    catalog : DescriptorCatalog
    selected : sequence of str, optional
        Names to save. None uses the catalog's default selection, minus
        format-specific descriptors when only MIDI input is expected.
    input_kind : {"any", "midi", "musicxml"}

    Returns
    -------
    list of bool
        Aligned with catalog order.

    Raises
    ------
    ConfigurationError
        On unknown names, an empty selection, or a format-specific
        descriptor requested for MIDI-only input.
    """
    if selected is None:
        names = catalog.default_selection()
        if input_kind == "midi":
            names = [n for n in names if catalog[n].variant != Variant.FORMAT_SPECIFIC]
    else:
        names = list(dict.fromkeys(selected))
        if input_kind == "midi":
            bad = [n for n in names if catalog[n].variant == Variant.FORMAT_SPECIFIC]
            if bad:
                raise ConfigurationError(
                    f"Descriptors {bad} need notation input but input_kind is 'midi'"
                )

    if not names:
        raise ConfigurationError("No descriptors selected for extraction")

    logger.debug("Selected %d of %d descriptors", len(names), len(catalog))
    return catalog.requested_vector(names)
