"""Request and response bodies."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ramlcore.api.parameters import NamedParameter
from ramlcore.exceptions import ValidationError
from ramlcore.types.base import Type, ValidatorInterface
from ramlcore.types.errors import TypeValidationError

WEB_FORM_MEDIA_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


@dataclass
class Body:
    """A body declaration for one media type.

    RAML 1.0 bodies declare a ``type``; RAML 0.8 bodies declare a ``schema``,
    which is a compiled schema definition or, when schema parsing is
    disabled, the raw schema text.
    """

    media_type: str
    description: str | None = None
    type: Type | None = None
    schema: ValidatorInterface | str | None = None
    examples: list[Any] = field(default_factory=list)

    @property
    def validator(self) -> ValidatorInterface | None:
        """Whatever validates values of this body: the type, else a compiled schema."""
        if self.type is not None:
            return self.type
        if isinstance(self.schema, ValidatorInterface):
            return self.schema
        return None

    def check(self, value: Any) -> list[TypeValidationError]:
        validator = self.validator
        return validator.check(value) if validator is not None else []


@dataclass
class WebFormBody(Body):
    """A form body whose fields are declared as named parameters."""

    parameters: dict[str, NamedParameter] = field(default_factory=dict)

    @staticmethod
    def is_web_form(media_type: str) -> bool:
        return media_type.split(";", 1)[0].strip().lower() in WEB_FORM_MEDIA_TYPES

    def check(self, value: Any) -> list[TypeValidationError]:
        if self.type is not None:
            return self.type.check(value)
        if not isinstance(value, Mapping):
            return [TypeValidationError.unexpected_value_type("body", "form fields", value)]
        errors = []
        for key, parameter in self.parameters.items():
            try:
                parameter.validate(value.get(key))
            except ValidationError as e:
                errors.append(TypeValidationError(key, str(e)))
        return errors
