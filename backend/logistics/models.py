from django.db import models

from jobs.models import JobStatus


class Job(models.Model):
    """
    Persistent form of a JobRecord.
    Tracks lifecycle: Scheduled -> ... -> Completed, with a timestamp per milestone.
    The database UNIQUE constraint on reference_number is what makes duplicate
    creates and uploads fail atomically.
    """
    STATUS_CHOICES = [(status.value, status.value) for status in JobStatus]

    reference_number = models.CharField(max_length=100, unique=True)
    customer_name = models.CharField(max_length=255)
    driver_name = models.CharField(max_length=255)

    # Free-text addresses, sent as-is to the routing provider
    collection_address = models.TextField()
    delivery_address = models.TextField()

    collection_time = models.DateTimeField(db_index=True)

    # Minutes, from the last successful live ETA lookup
    estimated_duration = models.PositiveIntegerField(blank=True, null=True)

    status = models.CharField(max_length=32, choices=STATUS_CHOICES, default=JobStatus.SCHEDULED.value)
    notes = models.TextField(blank=True, default="")

    time_en_route_to_collection = models.DateTimeField(blank=True, null=True)
    time_arrived_at_collection = models.DateTimeField(blank=True, null=True)
    time_loaded = models.DateTimeField(blank=True, null=True)
    time_en_route_to_delivery = models.DateTimeField(blank=True, null=True)
    time_arrived_at_delivery = models.DateTimeField(blank=True, null=True)
    time_completed = models.DateTimeField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["collection_time"]

    def __str__(self):
        return f"Job {self.reference_number} - {self.status}"
