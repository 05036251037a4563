import logging
from enum import Enum
from typing import List, Optional, Tuple
from app.models.stats import RegionSummary, CountryStats

logger = logging.getLogger(__name__)


class RankingMetric(Enum):
    """Métrica por la que se ordena un ranking: (atributo de CountryStats, encabezado)."""
    CASES = ("total_confirmed", "TOP CASOS")
    RECOVERED = ("total_recovered", "TOP RECUPERADOS")
    DEATHS = ("total_deaths", "TOP FALLECIDOS")

    @property
    def attribute(self) -> str:
        return self.value[0]

    @property
    def title(self) -> str:
        return self.value[1]


class StatsFormatter:
    """
    Responsabilidad única: formatear estadísticas para mostrar al usuario.
    """

    # Correcciones de nombre aplicadas solo al mostrar, después de ordenar
    COUNTRY_NAME_FIXES = {"United States of America": "United States"}
    COUNTRY_CODE_FIXES = {"IR": "Iran"}

    @staticmethod
    def format_region_summary(label: str, summary: RegionSummary) -> str:
        """Formatea los totales de una región en varias líneas."""
        return (
            f"{label}\n"
            f"Casos: {summary.cases}\n"
            f"Recuperados: {summary.recovered}\n"
            f"Fallecidos: {summary.deaths}"
        )

    @staticmethod
    def display_name(country: CountryStats) -> str:
        """Nombre del país con las correcciones de visualización aplicadas."""
        if country.country_code in StatsFormatter.COUNTRY_CODE_FIXES:
            return StatsFormatter.COUNTRY_CODE_FIXES[country.country_code]
        return StatsFormatter.COUNTRY_NAME_FIXES.get(country.country, country.country)

    @staticmethod
    def rank(countries: List[CountryStats], metric: RankingMetric) -> List[CountryStats]:
        """Ordena de mayor a menor por la métrica; los empates conservan el orden original."""
        return sorted(countries, key=lambda c: getattr(c, metric.attribute), reverse=True)

    @staticmethod
    def format_ranking(countries: List[CountryStats], metric: RankingMetric, limit: int = 10) -> str:
        """
        Formatea el top N de países por la métrica.

        Example:
            TOP CASOS

            1. United States: 1000
            2. Iran: 900
        """
        lines = [f"{metric.title}\n"]
        for position, country in enumerate(StatsFormatter.rank(countries, metric)[:limit], start=1):
            value = getattr(country, metric.attribute)
            lines.append(f"{position}. {StatsFormatter.display_name(country)}: {value}")
        return "\n".join(lines) + "\n"

    @staticmethod
    def highest_death_rate(countries: List[CountryStats]) -> Optional[Tuple[CountryStats, float]]:
        """País con mayor tasa de letalidad (fallecidos / confirmados * 100); ignora países sin casos."""
        best: Optional[Tuple[CountryStats, float]] = None
        for country in countries:
            if country.total_confirmed <= 0:
                continue
            rate = country.total_deaths / country.total_confirmed * 100
            if best is None or rate > best[1]:
                best = (country, rate)
        return best

    @staticmethod
    def format_death_rate(country: CountryStats, rate: float) -> str:
        name = StatsFormatter.display_name(country)
        return (
            f"La tasa de letalidad más alta está en {name} con {rate:.2f}%\n\n"
            f"{name}\n"
            f"Casos: {country.total_confirmed}\n"
            f"Recuperados: {country.total_recovered}\n"
            f"Fallecidos: {country.total_deaths}"
        )
