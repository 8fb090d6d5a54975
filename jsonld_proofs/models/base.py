"""Base classes for Models and Schemas."""

import logging
from typing import Mapping, Optional, Type, TypeVar, Union

from marshmallow import EXCLUDE, Schema, ValidationError, post_dump, post_load

from ..core.error import BaseError
from ..utils.classloader import ClassLoader

LOGGER = logging.getLogger(__name__)

ModelType = TypeVar("ModelType", bound="BaseModel")


def resolve_class(the_cls, relative_cls: Optional[type] = None) -> type:
    """Resolve a class given as a type or a name.

    Names without a module are looked up in the module of `relative_cls`.
    """
    if isinstance(the_cls, type):
        return the_cls
    if isinstance(the_cls, str):
        return ClassLoader.load_class(
            the_cls, relative_cls.__module__ if relative_cls else None
        )
    raise TypeError(f"Could not resolve class from {the_cls!r}")


class BaseModelError(BaseError):
    """Base exception class for base model errors."""


class BaseModel:
    """Model with a marshmallow schema named in its `Meta.schema_class`."""

    class Meta:
        """BaseModel metadata."""

        schema_class = None

    @classmethod
    def _schema(cls) -> "BaseModelSchema":
        if not cls.Meta.schema_class:
            raise TypeError(f"Can't resolve schema for {cls.__name__}")
        return resolve_class(cls.Meta.schema_class, cls)(unknown=EXCLUDE)

    @classmethod
    def deserialize(cls: Type[ModelType], obj: Union[str, Mapping]) -> ModelType:
        """Load a model instance from a dict or a JSON string.

        Raises:
            BaseModelError: If the data does not validate

        """
        schema = cls._schema()
        try:
            return schema.loads(obj) if isinstance(obj, str) else schema.load(obj)
        except ValidationError as err:
            LOGGER.warning("%s validation error: %s", cls.__name__, err.messages)
            raise BaseModelError(f"{cls.__name__} schema validation failed") from err

    def serialize(self, *, as_string: bool = False) -> Union[str, dict]:
        """Dump the model to a dict, or to compact JSON when `as_string` is set."""
        schema = self._schema()
        if as_string:
            return schema.dumps(self, separators=(",", ":"))
        return schema.dump(self)

    @classmethod
    def serde(cls, obj: Union["BaseModel", Mapping, None]) -> Optional["BaseModel"]:
        """Return a model instance for either a model or its serialized form."""
        if obj is None or isinstance(obj, BaseModel):
            return obj
        return cls.deserialize(obj)

    def to_json(self) -> str:
        """Create a JSON representation of the model instance."""
        return self._schema().dumps(self)

    def __eq__(self, other: object) -> bool:
        """Compare models by type and attributes."""
        return type(other) is type(self) and self.__dict__ == other.__dict__

    def __repr__(self) -> str:
        """Return a human readable representation of this class."""
        items = ", ".join(f"{k}={v!r}" for k, v in self.__dict__.items())
        return f"<{self.__class__.__name__}({items})>"


class BaseModelSchema(Schema):
    """BaseModel schema."""

    class Meta:
        """BaseModelSchema metadata."""

        model_class = None
        skip_values = [None]

    @post_load
    def make_model(self, data: dict, **kwargs):
        """Return model instance after loading."""
        if not self.Meta.model_class:
            raise TypeError(f"Can't resolve model for {self.__class__.__name__}")
        return resolve_class(self.Meta.model_class, self.__class__)(**data)

    @post_dump
    def remove_skipped_values(self, data, **kwargs):
        """Remove values that are are marked to skip."""
        skip_values = getattr(self.Meta, "skip_values", None) or [None]
        return {key: value for key, value in data.items() if value not in skip_values}
