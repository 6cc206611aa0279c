"""Descriptor definitions and the catalog that holds them.

A ``DescriptorDefinition`` declares a descriptor's identity, its output
shape and what it depends on; ``compute`` does the arithmetic. The
catalog keeps definitions in a fixed order (which is also the tie-break
order of evaluation plans) and validates cross-references once, when it
is constructed.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, Union

from symfeat.contracts.failure import ConfigurationError

__all__ = ['VARIABLE', 'Variant', 'DescriptorDefinition', 'DescriptorCatalog']

VARIABLE = "variable"


class Variant(str, Enum):
    """Which recordings a descriptor can be computed for."""
    GENERIC = "generic"
    FORMAT_SPECIFIC = "format_specific"


@dataclass(frozen=True)
class DescriptorDefinition:
    """Declaration of one descriptor.

    Attributes
    ----------
    name : str
        Unique name, also the output column.
    code : str
        Short family code (e.g. ``"P-8"``).
    description : str
        One-line human description.
    dimensionality : int or "variable"
        Number of values produced per window.
    compute : callable
        ``compute(rep, prerequisite_values) -> sequence of float``.
        ``prerequisite_values`` holds one array per prerequisite, in
        declaration order, already shifted by its offset.
    prerequisites : tuple of str
        Names of descriptors whose values ``compute`` reads.
    offsets : tuple of int
        Window offset per prerequisite. 0 is the current window, -1 the
        previous one. Positive (look-ahead) offsets are rejected.
    per_window : bool
        False for descriptors that describe the recording as a whole;
        they are computed but never emitted per window.
    variant : Variant
        FORMAT_SPECIFIC descriptors need a recording side channel.
    default_on : bool
        Part of the default selection.
    """
    name: str
    code: str
    description: str
    dimensionality: Union[int, str]
    compute: Callable
    prerequisites: tuple = ()
    offsets: Optional[tuple] = None
    per_window: bool = True
    variant: Variant = Variant.GENERIC
    default_on: bool = True

    def __post_init__(self):
        if not self.name:
            raise ConfigurationError("Descriptor name must not be empty")
        if self.dimensionality != VARIABLE and (
                not isinstance(self.dimensionality, int) or self.dimensionality < 1):
            raise ConfigurationError(
                f"Descriptor '{self.name}': dimensionality must be a positive int or '{VARIABLE}'"
            )
        prerequisites = tuple(self.prerequisites)
        offsets = tuple(self.offsets) if self.offsets is not None else (0,) * len(prerequisites)
        if len(offsets) != len(prerequisites):
            raise ConfigurationError(
                f"Descriptor '{self.name}': {len(offsets)} offsets for "
                f"{len(prerequisites)} prerequisites"
            )
        if any(offset > 0 for offset in offsets):
            raise ConfigurationError(
                f"Descriptor '{self.name}': offsets must be <= 0 (got {offsets})"
            )
        object.__setattr__(self, "prerequisites", prerequisites)
        object.__setattr__(self, "offsets", offsets)
        object.__setattr__(self, "variant", Variant(self.variant))

    @property
    def is_variable(self) -> bool:
        return self.dimensionality == VARIABLE

    @property
    def history_depth(self) -> int:
        """How many earlier windows this descriptor reaches back."""
        return max((-offset for offset in self.offsets), default=0)


class DescriptorCatalog:
    """Ordered, validated collection of descriptor definitions.

    Raises
    ------
    ConfigurationError
        On duplicate names or prerequisites that name no catalog entry.
    """

    def __init__(self, definitions: Iterable[DescriptorDefinition]):
        self._definitions = tuple(definitions)
        self._index = {}
        for position, definition in enumerate(self._definitions):
            if definition.name in self._index:
                raise ConfigurationError(f"Duplicate descriptor name '{definition.name}'")
            self._index[definition.name] = position

        for definition in self._definitions:
            for prerequisite in definition.prerequisites:
                if prerequisite not in self._index:
                    raise ConfigurationError(
                        f"Descriptor '{definition.name}' requires '{prerequisite}', "
                        f"which is not in the catalog"
                    )

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions)

    def __contains__(self, name: str) -> bool:
        return name in self._index

    def __getitem__(self, key: Union[int, str]) -> DescriptorDefinition:
        if isinstance(key, str):
            return self._definitions[self.index_of(key)]
        return self._definitions[key]

    def index_of(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise ConfigurationError(f"Unknown descriptor '{name}'") from None

    def names(self) -> list:
        return [d.name for d in self._definitions]

    def default_selection(self) -> list:
        return [d.name for d in self._definitions if d.default_on]

    def requested_vector(self, names: Optional[Sequence[str]] = None) -> list:
        """Boolean save vector aligned with catalog order.

        Parameters
        ----------
        names : sequence of str, optional
            Descriptors to save. None selects the default set.
        """
        if names is None:
            names = self.default_selection()
        requested = [False] * len(self._definitions)
        for name in names:
            requested[self.index_of(name)] = True
        return requested
