"""
WSGI config for Project project.

It exposes the WSGI callable as a module-level variable named ``application``.

For more information on this file, see
https://docs.djangoproject.com/en/5.0/howto/deployment/wsgi/
"""

import os

from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'Project.settings')

application = get_wsgi_application()

# Log the gate classification settings so a misrouted admin or login path is obvious.
try:
    import logging
    from django.conf import settings

    logger = logging.getLogger("hidesite.startup")
    logger.info(
        "HideSite startup DEBUG=%s LOGIN_URL=%s admin_prefixes=%s api_prefixes=%s",
        settings.DEBUG,
        settings.LOGIN_URL,
        getattr(settings, "HIDE_SITE_ADMIN_PREFIXES", None),
        getattr(settings, "HIDE_SITE_API_PREFIXES", None),
    )
except Exception:
    # Never block startup on logging issues.
    pass
