"""
Serializer fields shared across apps.
"""
from rest_framework import serializers


class StringListField(serializers.ListField):
    """
    List of strings that also accepts a comma-separated string.
    "Wi-Fi, Parking" and ["Wi-Fi", "Parking"] both become ["Wi-Fi", "Parking"].
    Blank items are dropped.
    """

    child = serializers.CharField(max_length=255)

    def to_internal_value(self, data):
        if isinstance(data, str):
            data = [item.strip() for item in data.split(',')]
        if isinstance(data, (list, tuple)):
            data = [item.strip() if isinstance(item, str) else item for item in data]
            data = [item for item in data if item != '' and item is not None]
        return super().to_internal_value(data)
