"""Schemas for the render state elements: ``bevel``, ``c_interp``, ``d_interp`` and ``lod``."""

from __future__ import annotations

__all__ = ["LEVEL_OF_DETAIL_SCHEMA", "switch_schema"]

import typing as t

from objdecode.elements import LevelOfDetail, Switch
from objdecode.schemas.base import Scalar, Schema, ValueKind


def switch_schema(element: str) -> Schema:
    """Create the schema of an ``on``/``off`` statement.

    :param element: The name of the element, such as ``bevel interpolation``.
    :return: The schema.
    """
    return Schema(
        element=element,
        fields=(Scalar("enabled", ValueKind.BOOL, name=f"{element} parameter"),),
        factory=Switch,
    )


#: Level of detail: ``lod level``.
LEVEL_OF_DETAIL_SCHEMA: t.Final[Schema] = Schema(
    element="level of detail",
    fields=(Scalar("level", ValueKind.INT, name="level"),),
    factory=LevelOfDetail,
)
