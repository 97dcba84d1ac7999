from __future__ import annotations
"""server/gitlab_notifier/core/errors.py
~~~~~~~~~~~~~~~~~~~~~~~~
Exceptions du relais.

- MalformedEventError : corps de webhook inexploitable → 500 côté endpoint.
- NotificationDeliveryError : échec d'envoi Feishu, loggé puis avalé par le
  service de notification (jamais visible par GitLab).
"""


class NotifierError(Exception):
    """Base des erreurs applicatives."""


class MalformedEventError(NotifierError):
    pass


class NotificationDeliveryError(NotifierError):
    def __init__(self, message: str, *, status_code: int | None = None, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
