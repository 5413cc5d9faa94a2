"""
Health check endpoint for load balancers and monitoring.

Reports database reachability and whether the schema is fully migrated;
either failing turns the response into a 503.
"""
import logging
import time

from django.conf import settings
from django.db import DatabaseError, connection
from django.db.migrations.executor import MigrationExecutor
from django.http import JsonResponse
from django.utils import timezone
from django.views import View

logger = logging.getLogger(__name__)


class BasicHealthCheckView(View):
    """Unauthenticated GET /api/health/"""

    def get(self, request):
        started = time.monotonic()
        checks = {
            'database': self._check_database(),
        }
        if checks['database']['status'] == 'healthy':
            checks['migrations'] = self._check_migrations()

        healthy = all(check['status'] == 'healthy' for check in checks.values())
        if not healthy:
            logger.error(f"Health check failed: {checks}")

        return JsonResponse({
            'status': 'healthy' if healthy else 'unhealthy',
            'timestamp': timezone.now().isoformat(),
            'version': settings.SPECTACULAR_SETTINGS.get('VERSION'),
            'checks': checks,
            'response_time_ms': round((time.monotonic() - started) * 1000, 2),
        }, status=200 if healthy else 503)

    def _check_database(self):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError as e:
            return {'status': 'unhealthy', 'message': f'Database unreachable: {e.__class__.__name__}'}
        return {'status': 'healthy', 'engine': connection.vendor}

    def _check_migrations(self):
        executor = MigrationExecutor(connection)
        pending = executor.migration_plan(executor.loader.graph.leaf_nodes())
        if pending:
            return {
                'status': 'unhealthy',
                'message': 'Unapplied migrations',
                'pending': [f'{migration.app_label}.{migration.name}' for migration, _ in pending],
            }
        return {'status': 'healthy'}
