"""Pydantic models for stored Pokemon documents and query results."""

from __future__ import annotations

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Stored document ---


class PokemonRecord(BaseModel):
    """One Pokemon document as imported from the JSON datasets.

    Field names describe the data; aliases are the stored/wire keys.
    Every value stays a string, including stats and the legendary flag.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id_key: str = Field(alias="dex_number", description="Padded dex key such as '#001'")
    name: str
    primary_category: str = Field(alias="type_01")
    # Empty string means the Pokemon has a single type.
    secondary_category: str = Field(default="", alias="type_02")
    ability_primary: str = Field(default="", alias="ability_01")
    ability_secondary: str = Field(default="", alias="ability_02")
    hidden_ability: str = ""
    is_special: str = Field(default="", alias="is_legendary", description="'True' or 'False'")
    description: str = Field(default="", alias="bio")
    hp: str = ""
    attack: str = ""
    defense: str = ""
    sp_attack: str = ""
    sp_defense: str = ""
    speed: str = ""

    def to_wire(self) -> Dict[str, str]:
        """Return the document shape used in storage and JSON responses."""
        return self.model_dump(by_alias=True)


# --- Query inputs ---


class FilterCriteria(BaseModel):
    """Optional search inputs collected for a single request."""

    model_config = ConfigDict(frozen=True)

    query: Optional[str] = Field(default=None, description="Substring of name or dex key")
    category: Optional[str] = Field(default=None, description="Type name, matched exactly")
    special: Optional[str] = Field(default=None, description="'true', 'false', or anything else to ignore")


# --- Aggregates ---


class CategoryCount(BaseModel):
    """A single grouped row from the type distribution pipeline."""

    category: str = Field(alias="_id")
    count: int = Field(ge=0)


class StatsSummary(BaseModel):
    """Collection-wide counts returned by the stats endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    total_count: int = Field(ge=0, alias="totalPokemon")
    special_count: int = Field(ge=0, alias="legendaryCount")
    # Only primary types are counted here.
    category_distribution: Dict[str, int] = Field(default_factory=dict, alias="typeDistribution")
