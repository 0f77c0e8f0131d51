"""Validation of solver plugin options.

Solver plugins describe the options accepted by each of their methods with a
schema dictionary. The classes in this module turn such a schema into a
Pydantic model that rejects unknown options and checks the types of the known
ones.
"""

from __future__ import annotations

from textwrap import dedent
from typing import Any, Callable, Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, HttpUrl, create_model, model_validator

T = TypeVar("T")


class OptionsSchemaModel(BaseModel):
    """Schema of the options of all methods of a solver plugin.

    **Example**:
    ```py
    from optbridge.config.options import OptionsSchemaModel

    schema = OptionsSchemaModel.model_validate(
        {"methods": {"slsqp": {"options": {"ftol": float, "maxiter": int}}}}
    )
    options = schema.get_options_model("slsqp")
    print(options.model_validate({"ftol": 1e-8}))  # ftol=1e-08 maxiter=None
    ```

    Attributes:
        methods: A mapping of method names to their schemas.
    """

    methods: dict[str, MethodSchemaModel[Any]]

    model_config = ConfigDict(extra="forbid")

    def get_options_model(self, method: str) -> type[BaseModel]:
        """Create a Pydantic model for validating the options of a method.

        Method names are compared case-insensitively.

        Args:
            method: The name of the method.

        Returns:
            A Pydantic model class that validates options for the method.

        Raises:
            ValueError: If the method is not in the schema.
        """
        schema = next(
            (
                method_schema
                for name, method_schema in self.methods.items()
                if name.lower() == method.lower()
            ),
            None,
        )
        if schema is None:
            msg = f"Method `{method}` not found in schema."
            raise ValueError(msg)
        options: dict[str, Any] = {
            option: (Union[type_, None], None)  # noqa: UP007
            for option, type_ in schema.options.items()
        }

        def _extra_validator(self: Any) -> Any:  # noqa: ANN401
            if self.__pydantic_extra__:
                unknown_options = ", ".join(
                    f"`{option}`" for option in self.__pydantic_extra__
                )
                msg = f"Unknown or unsupported option(s): {unknown_options}"
                raise ValueError(msg)
            return self

        validator: Callable[..., Any] = model_validator(mode="after")(_extra_validator)  # type: ignore[assignment]

        return create_model(
            "OptionsModel",
            __config__=ConfigDict(extra="allow"),
            __validators__={"_extra_validator": validator},
            **options,
        )


class MethodSchemaModel(BaseModel, Generic[T]):
    """Schema of the options of a single solver method.

    Attributes:
        options: Mapping of option names to their types.
        url:     An optional URL documenting the method.
    """

    options: dict[str, T]
    url: HttpUrl | None = None

    model_config = ConfigDict(extra="forbid")


def gen_options_table(schema: dict[str, Any]) -> str:
    """Generate a Markdown table documenting the options of a solver plugin.

    Args:
        schema: A dictionary representing the schema of plugin options.

    Returns:
        A Markdown table with one row per method.
    """
    OptionsSchemaModel.model_validate(schema)

    table = dedent("""
    | Method | Method Options |
    |--------|----------------|
    """)

    for method, method_schema in schema["methods"].items():
        url = MethodSchemaModel.model_validate(method_schema).url
        options = ", ".join(key for key in method_schema["options"])
        name = f"[{method}]({url})" if url else method
        table += f"|{name}|{options}|\n"

    return table
