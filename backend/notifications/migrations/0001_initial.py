# Generated migration for initial notifications app setup

import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Notification',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('notification_type', models.CharField(
                    choices=[
                        ('POI_CREATED', 'POI Created'),
                        ('POI_UPDATED', 'POI Updated'),
                        ('POI_DEACTIVATED', 'POI Deactivated'),
                        ('REVIEW_ADDED', 'Review Added'),
                        ('SYSTEM_ALERT', 'System Alert'),
                    ],
                    help_text='Type of notification: POI_CREATED, POI_UPDATED, POI_DEACTIVATED, REVIEW_ADDED, SYSTEM_ALERT',
                    max_length=30,
                )),
                ('title', models.CharField(max_length=200)),
                ('content', models.TextField()),
                ('channel', models.CharField(
                    choices=[
                        ('WEBSOCKET', 'WebSocket'),
                        ('EMAIL', 'Email'),
                        ('PUSH_MOBILE', 'Mobile Push'),
                        ('SMS', 'SMS'),
                    ],
                    default='WEBSOCKET',
                    max_length=20,
                )),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('sent', models.BooleanField(default=False)),
                ('sent_at', models.DateTimeField(blank=True, null=True)),
                ('read_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('recipient', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='notifications', to='user.appuser')),
            ],
            options={
                'db_table': 'notification',
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['recipient', 'created_at'], name='notif_recipient_created_idx'),
                    models.Index(fields=['recipient', 'read_at'], name='notif_recipient_read_idx'),
                ],
            },
        ),
    ]
