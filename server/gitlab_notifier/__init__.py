"""server/gitlab_notifier
~~~~~~~~~~~~~~~~~~~~~~~~
Relais GitLab → Feishu : webhooks merge request / pipeline vers cartes interactives.
"""

__version__ = "0.3.0"
