import inspect
import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Union, get_args, get_origin
from uuid import UUID

from polyfactory.factories.pydantic_factory import ModelFactory
from polyfactory.field_meta import FieldMeta
from pydantic import BaseModel, EmailStr, SecretStr


def iterable_to_dict(obj: Any) -> Any:
    """
    Recursively converts an iterable (list, tuple, dict, BaseModel) to plain
    Python values that can be compared against decoded JSON.
    """
    if isinstance(obj, BaseModel):
        return obj.dict() if isinstance(obj, SerializableBaseModel) else obj.model_dump(mode="json")
    elif isinstance(obj, (list, tuple)):
        return [iterable_to_dict(item) for item in obj]
    elif isinstance(obj, dict):
        return {key: iterable_to_dict(value) for key, value in obj.items()}
    elif isinstance(obj, Enum):
        return str(obj.value)
    elif isinstance(obj, UUID):
        return str(obj)
    elif isinstance(obj, datetime):
        return obj.isoformat()
    else:
        return obj


class SerializableBaseModel(BaseModel):
    """
    Base model that customizes dict/json output:
    - Converts EmailStr, SecretStr, UUID, Enum, datetime to str
    - Optionally masks secrets
    - Supports nested serialization via iterable_to_dict
    """

    def dict(self, exclude_unset=False, hide_secrets=False, *args, **kwargs) -> Dict[str, Any]:
        data = {}
        for field_name, value in self.__class__.model_fields.items():
            field_value = getattr(self, field_name)
            if exclude_unset and field_value is None:
                continue

            annotation = value.annotation
            origin = get_origin(annotation)
            args = get_args(annotation)

            # Unwrap Optional[...] so the inner type decides the conversion
            if origin is Union:
                non_none_args = [arg for arg in args if arg is not type(None)]
                if len(non_none_args) == 1:
                    annotation = non_none_args[0]

            if annotation is SecretStr:
                if field_value is None:
                    data[field_name] = None
                elif hide_secrets:
                    data[field_name] = "*" * 8
                else:
                    data[field_name] = field_value.get_secret_value()
            elif annotation is EmailStr:
                data[field_name] = str(field_value) if field_value is not None else None
            else:
                data[field_name] = iterable_to_dict(field_value)

        return data

    def __eq__(self, other: Any) -> bool:
        """Equality comparison against another model or a decoded JSON dict."""
        if isinstance(other, SerializableBaseModel):
            return type(self) is type(other) and self.dict() == other.dict()
        elif isinstance(other, dict):
            return self.dict() == other
        return False

    def __str__(self) -> str:
        """String representation as JSON."""
        return json.dumps(self.dict())


class Fakable:
    """
    Mixin class to add `.fake()` support for generating synthetic data using Polyfactory.
    """

    @classmethod
    def fake(cls, n: int = 1, **overrides) -> Union[BaseModel, list[BaseModel]]:
        """
        Generates one or more fake instances of the model, optionally overriding fields.
        """

        class _Factory(ModelFactory):
            __model__ = cls

            @classmethod
            def get_field_value(cls, field_meta: FieldMeta, *args, **kwargs):
                """
                Override to handle secrets, emails and nested fakable models.
                """
                annotation = field_meta.annotation
                origin = get_origin(annotation)
                args_ = get_args(annotation)

                if field_meta.name == "password" or annotation is SecretStr or (
                    origin is Union and SecretStr in args_
                ):
                    return SecretStr("ValidPassword123!")

                if field_meta.name == "email":
                    return cls.__faker__.email()

                # Handle nested BaseModel
                if inspect.isclass(annotation) and issubclass(annotation, BaseModel):
                    if hasattr(annotation, "fake"):
                        return annotation.fake()

                # Handle List[BaseModel]
                if origin is list and args_:
                    inner_type = args_[0]
                    if inspect.isclass(inner_type) and issubclass(inner_type, BaseModel):
                        if hasattr(inner_type, "fake"):
                            count = cls.__faker__.random_int(min=1, max=3)
                            return [inner_type.fake() for _ in range(count)]

                return super().get_field_value(field_meta, *args, **kwargs)

        if n == 1:
            return _Factory.build(**overrides)
        else:
            return _Factory.batch(size=n, **overrides)

