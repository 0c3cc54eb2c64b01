from __future__ import annotations

from django.contrib.admin.views.decorators import staff_member_required
from django.http import JsonResponse

from .gating.status import hide_site_status_snapshot


@staff_member_required
def hide_site_status(request):
    return JsonResponse(hide_site_status_snapshot())
