import uuid
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class PoiReview(models.Model):
    """
    A user's rating of a POI, as submitted from one of the client platforms.
    Likes and dislikes are counters other users increment on the review.
    """
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    poi = models.ForeignKey('locations.PointOfInterest', on_delete=models.CASCADE, related_name='reviews')
    user = models.ForeignKey('user.AppUser', on_delete=models.CASCADE, related_name='reviews')
    organization = models.ForeignKey('organizations.Organization', on_delete=models.CASCADE, related_name='reviews')
    platform_type = models.CharField(max_length=50, help_text="Client platform, e.g. WEB, ANDROID, IOS")
    rating = models.PositiveSmallIntegerField(
        help_text="Rating from 1 to 5",
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    review_text = models.TextField(blank=True, default="")
    likes = models.PositiveIntegerField(default=0)
    dislikes = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'poi_review'
        indexes = [
            models.Index(fields=['poi', 'created_at'], name='review_poi_created_idx'),
            models.Index(fields=['user', 'created_at'], name='review_user_created_idx'),
        ]

    def __str__(self):
        return f"Review by {self.user.username} for {self.poi.name} - {self.rating}/5"
