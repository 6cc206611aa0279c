"""Base Pydantic model with strict defaults for symfeat configs.

All config schemas inherit from this base so parameter, user, CLI and
internal configs validate the same way.
"""

from pydantic import BaseModel, ConfigDict


class SymfeatBaseModel(BaseModel):
    """Base model for all symfeat configuration schemas.

    - No extra fields allowed
    - Assignments are validated after initialization
    - Enum members are stored as their values
    - Leading/trailing whitespace is stripped from strings
    """

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
    )
