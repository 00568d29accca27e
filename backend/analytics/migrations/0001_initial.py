# Generated migration for initial analytics app setup

import django.db.models.deletion
import django.utils.timezone
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        ('organizations', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PoiAccessLog',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.UUIDField(blank=True, null=True)),
                ('platform_type', models.CharField(help_text='Client platform, e.g. WEB, ANDROID, IOS', max_length=50)),
                ('access_type', models.CharField(
                    choices=[
                        ('VIEW', 'View'),
                        ('CLICK', 'Click'),
                        ('SEARCH', 'Search'),
                        ('REVIEW', 'Review'),
                        ('SHARE', 'Share'),
                        ('NAVIGATE', 'Navigate'),
                    ],
                    help_text='Type of access: VIEW, CLICK, SEARCH, REVIEW, SHARE, NAVIGATE',
                    max_length=20,
                )),
                ('accessed_at', models.DateTimeField(default=django.utils.timezone.now)),
                ('metadata', models.JSONField(blank=True, default=dict)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_logs', to='organizations.organization')),
                ('poi', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='access_logs', to='locations.pointofinterest')),
            ],
            options={
                'db_table': 'poi_access_log',
                'indexes': [
                    models.Index(fields=['poi', 'accessed_at'], name='access_poi_time_idx'),
                    models.Index(fields=['organization', 'platform_type'], name='access_org_platform_idx'),
                    models.Index(fields=['accessed_at'], name='access_time_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PoiPlatformStat',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('platform_type', models.CharField(max_length=50)),
                ('stat_date', models.DateField(default=django.utils.timezone.localdate)),
                ('views', models.PositiveIntegerField(default=0)),
                ('reviews', models.PositiveIntegerField(default=0)),
                ('likes', models.PositiveIntegerField(default=0)),
                ('dislikes', models.PositiveIntegerField(default=0)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='platform_stats', to='organizations.organization')),
                ('poi', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name='platform_stats', to='locations.pointofinterest')),
            ],
            options={
                'db_table': 'poi_platform_stat',
                'indexes': [
                    models.Index(fields=['organization', 'stat_date'], name='stat_org_date_idx'),
                    models.Index(fields=['poi', 'stat_date'], name='stat_poi_date_idx'),
                ],
            },
        ),
    ]
