# Generated migration for initial reviews app setup

import django.core.validators
import django.db.models.deletion
import uuid
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('locations', '0001_initial'),
        ('organizations', '0001_initial'),
        ('user', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='PoiReview',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('platform_type', models.CharField(help_text='Client platform, e.g. WEB, ANDROID, IOS', max_length=50)),
                ('rating', models.PositiveSmallIntegerField(help_text='Rating from 1 to 5', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(5)])),
                ('review_text', models.TextField(blank=True, default='')),
                ('likes', models.PositiveIntegerField(default=0)),
                ('dislikes', models.PositiveIntegerField(default=0)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('organization', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='organizations.organization')),
                ('poi', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='locations.pointofinterest')),
                ('user', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='reviews', to='user.appuser')),
            ],
            options={
                'db_table': 'poi_review',
                'indexes': [
                    models.Index(fields=['poi', 'created_at'], name='review_poi_created_idx'),
                    models.Index(fields=['user', 'created_at'], name='review_user_created_idx'),
                ],
            },
        ),
    ]
