# Generated migration for initial locations app setup

import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('organizations', '0001_initial'),
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PointOfInterest',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(help_text='The official name of the place', max_length=255)),
                ('poi_type', models.CharField(help_text='e.g. RESTAURANT, HOTEL, MUSEUM', max_length=100)),
                ('category', models.CharField(help_text='e.g. Food & Drink, Transport', max_length=100)),
                ('description', models.TextField(blank=True, default='')),
                ('long_name', models.CharField(blank=True, default='', max_length=255)),
                ('short_name', models.CharField(blank=True, default='', max_length=100)),
                ('friendly_name', models.CharField(blank=True, default='', max_length=255)),
                ('latitude', models.FloatField(blank=True, help_text='Decimal degrees, -90 to 90', null=True)),
                ('longitude', models.FloatField(blank=True, help_text='Decimal degrees, -180 to 180', null=True)),
                ('street_number', models.CharField(blank=True, default='', max_length=20)),
                ('street_name', models.CharField(blank=True, default='', max_length=255)),
                ('city', models.CharField(blank=True, default='', max_length=100)),
                ('state_province', models.CharField(blank=True, default='', max_length=100)),
                ('postal_code', models.CharField(blank=True, default='', max_length=20)),
                ('country', models.CharField(blank=True, default='', max_length=100)),
                ('informal_address', models.CharField(blank=True, default='', help_text="Landmark based directions, e.g. 'behind the central market'", max_length=512)),
                ('phone_number', models.CharField(blank=True, default='', max_length=30)),
                ('website_url', models.URLField(blank=True, default='', max_length=500)),
                ('image_urls', models.JSONField(blank=True, default=list)),
                ('amenities', models.JSONField(blank=True, default=list, help_text="e.g. ['Wi-Fi', 'Parking']")),
                ('keywords', models.JSONField(blank=True, default=list)),
                ('type_tags', models.JSONField(blank=True, default=list)),
                ('operation_time_plan', models.JSONField(blank=True, default=dict, help_text='Opening hours per weekday')),
                ('contacts', models.JSONField(blank=True, default=list, help_text='List of {name, role, phone, email}')),
                ('popularity_score', models.FloatField(default=0.0, help_text='Ranking signal, expected 0 - 100')),
                ('is_active', models.BooleanField(default=True)),
                ('deactivation_reason', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='pois', to='organizations.organization')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='created_pois', to='user.appuser')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_pois', to='user.appuser')),
                ('deactivated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='deactivated_pois', to='user.appuser')),
            ],
            options={
                'db_table': 'point_of_interest',
                'indexes': [
                    models.Index(fields=['is_active', 'latitude'], name='poi_active_lat_idx'),
                    models.Index(fields=['is_active', '-popularity_score'], name='poi_active_popularity_idx'),
                    models.Index(fields=['poi_type'], name='poi_type_idx'),
                    models.Index(fields=['category'], name='poi_category_idx'),
                ],
            },
        ),
    ]
