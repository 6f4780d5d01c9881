import os
from datetime import date, datetime, timezone
from typing import Optional

import pytz


DEFAULT_TIMEZONE = os.getenv('APP_TIMEZONE', 'America/Sao_Paulo')


def now_utc() -> datetime:
    """Fonte única de tempo: agora em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def _get_timezone(tz_name: Optional[str] = None):
    return pytz.timezone(tz_name or DEFAULT_TIMEZONE)


def to_local(value: datetime, tz_name: Optional[str] = None) -> datetime:
    """Converte datetime para o fuso local configurado (assume UTC se naive)."""
    if value is None or not isinstance(value, datetime):
        return value
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(_get_timezone(tz_name))


def local_now(tz_name: Optional[str] = None) -> datetime:
    return to_local(now_utc(), tz_name)


def local_today(tz_name: Optional[str] = None) -> date:
    """Data de hoje no fuso da aplicação, usada em vigências e validades."""
    return local_now(tz_name).date()


def dias_ate(data_alvo: Optional[date], hoje: Optional[date] = None) -> Optional[int]:
    """Dias corridos até `data_alvo`; negativo quando a data já passou."""
    if data_alvo is None:
        return None
    if isinstance(data_alvo, datetime):
        data_alvo = data_alvo.date()
    return (data_alvo - (hoje or local_today())).days
