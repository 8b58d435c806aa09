"""
Feriados brasileiros para o calendário de SLA: fixos e móveis (baseados na Páscoa)
"""
from datetime import date, timedelta
from typing import Dict, FrozenSet, Iterable, List

from dateutil.easter import easter

NATIONAL = "nacional"
OPTIONAL = "ponto_facultativo"

# (mês, dia, nome, tipo)
_FIXED_HOLIDAYS = [
    (1, 1, "Confraternização Universal", NATIONAL),
    (4, 21, "Tiradentes", NATIONAL),
    (5, 1, "Dia do Trabalho", NATIONAL),
    (9, 7, "Independência do Brasil", NATIONAL),
    (10, 12, "Nossa Senhora Aparecida", NATIONAL),
    (11, 2, "Finados", NATIONAL),
    (11, 15, "Proclamação da República", NATIONAL),
    (11, 20, "Dia da Consciência Negra", NATIONAL),
    (12, 25, "Natal", NATIONAL),
    (10, 28, "Dia do Servidor Público", OPTIONAL),
]

# (dias em relação à Páscoa, nome, tipo)
_MOVABLE_HOLIDAYS = [
    (-48, "Segunda-feira de Carnaval", OPTIONAL),
    (-47, "Terça-feira de Carnaval", OPTIONAL),
    (-2, "Sexta-feira Santa", NATIONAL),
    (60, "Corpus Christi", OPTIONAL),
]


def national_holidays(year: int, include_optional: bool = True) -> List[Dict]:
    """
    Lista de feriados (fixos + móveis) de um ano, ordenada por data

    Args:
        year: Ano desejado
        include_optional: Se inclui pontos facultativos

    Returns:
        Lista de dicts com data, nome e tipo
    """
    easter_day = easter(year)

    holidays = [
        {"date": date(year, month, day), "name": name, "kind": kind}
        for month, day, name, kind in _FIXED_HOLIDAYS
    ]
    holidays.extend(
        {"date": easter_day + timedelta(days=offset), "name": name, "kind": kind}
        for offset, name, kind in _MOVABLE_HOLIDAYS
    )

    if not include_optional:
        holidays = [h for h in holidays if h["kind"] == NATIONAL]

    holidays.sort(key=lambda h: h["date"])
    return holidays


def holiday_dates(years: Iterable[int], include_optional: bool = True) -> FrozenSet[date]:
    """Datas de feriado de vários anos, prontas para o BusinessHoursConfig"""
    return frozenset(
        h["date"]
        for year in years
        for h in national_holidays(year, include_optional)
    )
