from rest_framework import serializers
from .models import Organization


class OrganizationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Organization
        fields = ['id', 'name', 'code', 'org_type', 'is_active', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_code(self, value):
        # Blank codes are stored as NULL so the unique constraint ignores them
        return value or None
