import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse

from records.responses import envelope

logger = logging.getLogger(__name__)


def healthz(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
    except DatabaseError:
        logger.exception('health check: database unreachable')
        return JsonResponse(envelope(False, message='database unreachable', error='server_error'), status=500)
    return JsonResponse(envelope(True, data={'db': bool(row and row[0] == 1)}))
