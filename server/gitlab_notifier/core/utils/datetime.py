# coding: utf-8
# server/gitlab_notifier/core/utils/datetime.py
"""server/gitlab_notifier/core/utils/datetime.py
~~~~~~~~~~~~~~~~~~~~~~~~
Utilitaires pour la gestion des dates et heures.

Formats rencontrés dans les webhooks GitLab :
- "2016-08-12 15:23:28 UTC" (format historique des hooks)
- ISO-8601 ("2016-08-12T15:23:28Z", "2016-08-12T15:23:28.123+02:00")
- epoch en millisecondes (int/float)
"""

import math
from datetime import datetime, timezone
from typing import Optional, Union

_GITLAB_FORMATS = (
    "%Y-%m-%d %H:%M:%S UTC",
    "%Y-%m-%d %H:%M:%S %z",
)


def _as_utc(d: datetime) -> datetime:
    """Retourne d en timezone UTC 'aware'."""
    if d.tzinfo is None:
        return d.replace(tzinfo=timezone.utc)
    return d.astimezone(timezone.utc)


def parse_timestamp(value: Union[int, float, str, None]) -> Optional[datetime]:
    """Convertit un horodatage GitLab en datetime UTC, ou None si absent / illisible."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        try:
            return datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        except (OverflowError, OSError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    for fmt in _GITLAB_FORMATS:
        try:
            return _as_utc(datetime.strptime(text, fmt))
        except ValueError:
            continue
    try:
        return _as_utc(datetime.fromisoformat(text.replace("Z", "+00:00")))
    except ValueError:
        return None


def elapsed_seconds(start: Optional[datetime], end: Optional[datetime]) -> Optional[int]:
    """Secondes entières (floor) entre start et end ; None si l'un manque."""
    if start is None or end is None:
        return None
    delta = end - start
    return math.floor(delta.total_seconds())
