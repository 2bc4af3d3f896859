"""Descriptive model of a RAML API: resources, methods, responses, bodies, parameters."""

from ramlcore.api.body import Body, WebFormBody
from ramlcore.api.definition import ApiDefinition
from ramlcore.api.method import Method
from ramlcore.api.parameters import BaseUriParameter, NamedParameter
from ramlcore.api.resource import Resource
from ramlcore.api.response import Response
from ramlcore.api.security import (
    OAuth1Settings,
    OAuth2Settings,
    SecurityScheme,
    SecuritySchemeDescribedBy,
    SecuritySettings,
)

__all__ = [
    "ApiDefinition",
    "BaseUriParameter",
    "Body",
    "Method",
    "NamedParameter",
    "OAuth1Settings",
    "OAuth2Settings",
    "Resource",
    "Response",
    "SecurityScheme",
    "SecuritySchemeDescribedBy",
    "SecuritySettings",
    "WebFormBody",
]
