"""Parse-time configuration."""

import os

from pydantic import Field

from ramlcore.models import RamlBaseModel


def get_env_flag(env_var: str, default: bool = False) -> bool:
    """Get a boolean flag from an environment variable.

    Args:
        env_var: Name of the environment variable
        default: Default value if environment variable is not set

    Returns:
        True if the environment variable is set to "1", "true", or "yes" (case insensitive)
        False otherwise
    """
    value = os.environ.get(env_var, "").lower()
    return value in ("1", "true", "yes") if value else default


class ParseConfiguration(RamlBaseModel):
    """Switches controlling how a RAML document is loaded.

    Attributes:
        allow_directory_traversal: Allow ``!include`` of files outside the
            directory of the root document.
        parse_schemas: Compile ``schemas``/``schema:`` declarations into schema
            definitions. When disabled the raw text is kept.
        remote_file_inclusion: Allow ``!include`` and ``$ref`` of http(s) URLs.
        include_timeout: Timeout in seconds for remote includes.
    """

    allow_directory_traversal: bool = False
    parse_schemas: bool = True
    remote_file_inclusion: bool = False
    include_timeout: float = Field(default=10.0, gt=0)

    @classmethod
    def from_env(cls) -> "ParseConfiguration":
        """Build a configuration from ``RAMLCORE_*`` environment variables."""
        return cls(
            allow_directory_traversal=get_env_flag("RAMLCORE_ALLOW_DIRECTORY_TRAVERSAL"),
            parse_schemas=get_env_flag("RAMLCORE_PARSE_SCHEMAS", default=True),
            remote_file_inclusion=get_env_flag("RAMLCORE_ALLOW_REMOTE_INCLUDES"),
        )
