import uuid
from django.db import models


class Organization(models.Model):
    """
    Tenant owning users, POIs and every statistic collected about them.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    code = models.CharField(
        max_length=50,
        unique=True,
        null=True,
        blank=True,
        help_text="Short unique code used by external systems"
    )
    org_type = models.CharField(max_length=50, blank=True, default="")
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'organization'
        ordering = ['name']

    def __str__(self):
        return self.name
