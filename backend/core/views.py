from django.db import connection, DatabaseError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthView(APIView):
    """Liveness probe that also checks the database connection."""

    def get(self, request):
        try:
            with connection.cursor() as cursor:
                cursor.execute("SELECT 1")
                cursor.fetchone()
        except DatabaseError:
            return Response(
                {'status': 'DOWN', 'database': 'unavailable'},
                status=status.HTTP_503_SERVICE_UNAVAILABLE
            )
        return Response({'status': 'UP', 'database': 'ok'})
