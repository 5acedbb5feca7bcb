from django.db import connection
from django.http import JsonResponse
from django.utils import timezone


def health_check(request):
    """Liveness probe; also touches the database."""
    with connection.cursor() as cursor:
        cursor.execute('SELECT 1')
    return JsonResponse({
        'status': 'ok',
        'timestamp': timezone.now().isoformat(),
    })


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({'error': 'Not found'}, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({'error': 'Internal server error'}, status=500)
