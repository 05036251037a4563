from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional


class RegionSummary(BaseModel):
    """Totales de un país o del mundo."""
    cases: int
    recovered: int = 0
    deaths: int = 0


class CountryStats(BaseModel):
    """Una fila de la lista de países del resumen global."""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    country: str = Field(alias="Country")
    country_code: str = Field(default="", alias="CountryCode")
    total_confirmed: int = Field(default=0, alias="TotalConfirmed")
    total_recovered: int = Field(default=0, alias="TotalRecovered")
    total_deaths: int = Field(default=0, alias="TotalDeaths")


class NewsDigest(BaseModel):
    """Titulares de salud; las listas vienen alineadas por posición."""
    titles: List[str] = Field(default_factory=list)
    descriptions: List[str] = Field(default_factory=list)
    images: List[Optional[str]] = Field(default_factory=list)
    links: List[str] = Field(default_factory=list)
