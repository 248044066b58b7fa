"""Pydantic schema for the JSON-lines vertex format.

One vertex per line::

    {"_id": 1, "name": "marko", "age": 29,
     "_outE": [{"_label": "knows", "_inV": 2, "weight": 0.5}],
     "_inE": [{"_label": "created", "_outV": 4}]}

Element lists put vertices and edges on separate lines, told apart by
``_type``::

    {"_type": "vertex", "_id": 1, "name": "marko"}
    {"_type": "edge", "_label": "knows", "_outV": 1, "_inV": 2, "weight": 0.5}

Keys starting with ``_`` are reserved; every other key is a property.
"""

from __future__ import annotations

import logging
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

log = logging.getLogger(__name__)

RESERVED_PREFIX = "_"


class GraphSONBaseModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)
    element_type: str | None = Field(default=None, alias="_type")
    _logged_reserved_keys: ClassVar[set[str]] = set()

    def properties(self) -> dict[str, object]:
        """Return the non-reserved extra keys of this element."""

        extras = self.__pydantic_extra__ or {}
        unknown = {key for key in extras if key.startswith(RESERVED_PREFIX)}
        new_keys = unknown.difference(self._logged_reserved_keys)
        if new_keys:
            self._logged_reserved_keys.update(new_keys)
            log.warning(
                "GraphSON %s: ignoring unknown reserved keys: %s",
                type(self).__name__,
                ", ".join(sorted(new_keys)),
            )
        return {key: value for key, value in extras.items() if key not in unknown}


class GraphSONEdge(GraphSONBaseModel):
    label: str = Field(alias="_label")
    out_v: int | None = Field(default=None, alias="_outV")
    in_v: int | None = Field(default=None, alias="_inV")


class GraphSONVertex(GraphSONBaseModel):
    id: int = Field(alias="_id")
    out_e: list[GraphSONEdge] = Field(default_factory=list[GraphSONEdge], alias="_outE")
    in_e: list[GraphSONEdge] = Field(default_factory=list[GraphSONEdge], alias="_inE")
