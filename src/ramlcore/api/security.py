"""Security schemes and the request/response parts they describe."""

from dataclasses import dataclass, field, replace
from typing import Any

from pydantic import ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from ramlcore.api.parameters import NamedParameter
from ramlcore.api.response import Response
from ramlcore.exceptions import RamlParseError
from ramlcore.models import RamlBaseModel

OAUTH_1 = "OAuth 1.0"
OAUTH_2 = "OAuth 2.0"
ANONYMOUS = "null"


class SecuritySettings(RamlBaseModel):
    """Settings of a scheme type without dedicated settings; keys are kept as given."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)


class OAuth1Settings(SecuritySettings):
    request_token_uri: str | None = Field(default=None, alias="requestTokenUri")
    authorization_uri: str | None = Field(default=None, alias="authorizationUri")
    token_credentials_uri: str | None = Field(default=None, alias="tokenCredentialsUri")
    signatures: list[str] = Field(default_factory=list)


class OAuth2Settings(SecuritySettings):
    authorization_uri: str | None = Field(default=None, alias="authorizationUri")
    access_token_uri: str | None = Field(default=None, alias="accessTokenUri")
    authorization_grants: list[str] = Field(default_factory=list, alias="authorizationGrants")
    scopes: list[str] = Field(default_factory=list)


SETTINGS_MODELS: dict[str, type[SecuritySettings]] = {
    OAUTH_1: OAuth1Settings,
    OAUTH_2: OAuth2Settings,
}


@dataclass
class SecuritySchemeDescribedBy:
    """Headers, query parameters and responses a security scheme adds to a method."""

    headers: dict[str, NamedParameter] = field(default_factory=dict)
    query_parameters: dict[str, NamedParameter] = field(default_factory=dict)
    responses: dict[int, Response] = field(default_factory=dict)


@dataclass
class SecurityScheme:
    """A declared security scheme, or the anonymous ``null`` scheme of ``securedBy``.

    ``settings`` holds the raw settings mapping; ``parsed_settings`` reads it
    into the settings model of the scheme type.
    """

    key: str
    type: str | None = None
    description: str | None = None
    described_by: SecuritySchemeDescribedBy | None = None
    settings: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def anonymous(cls) -> "SecurityScheme":
        return cls(ANONYMOUS)

    @property
    def is_anonymous(self) -> bool:
        return self.key == ANONYMOUS

    def with_settings(self, overrides: dict[str, Any]) -> "SecurityScheme":
        """A copy whose settings are replaced key by key with ``overrides``."""
        return replace(self, settings={**self.settings, **overrides})

    def parsed_settings(self) -> SecuritySettings:
        """Read ``settings`` into the model of the scheme type.

        Raises:
            RamlParseError: If a setting has a value of the wrong kind
        """
        model = SETTINGS_MODELS.get(self.type or "", SecuritySettings)
        try:
            return model.model_validate(self.settings)
        except PydanticValidationError as e:
            raise RamlParseError(f'Invalid settings for security scheme "{self.key}": {e}') from e
