from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Job",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("reference_number", models.CharField(max_length=100, unique=True)),
                ("customer_name", models.CharField(max_length=255)),
                ("driver_name", models.CharField(max_length=255)),
                ("collection_address", models.TextField()),
                ("delivery_address", models.TextField()),
                ("collection_time", models.DateTimeField(db_index=True)),
                ("estimated_duration", models.PositiveIntegerField(blank=True, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("Scheduled", "Scheduled"),
                            ("En route to collection", "En route to collection"),
                            ("Onsite at collection", "Onsite at collection"),
                            ("Loaded", "Loaded"),
                            ("En route to delivery", "En route to delivery"),
                            ("Onsite at delivery", "Onsite at delivery"),
                            ("Completed", "Completed"),
                            ("Cancelled", "Cancelled"),
                        ],
                        default="Scheduled",
                        max_length=32,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("time_en_route_to_collection", models.DateTimeField(blank=True, null=True)),
                ("time_arrived_at_collection", models.DateTimeField(blank=True, null=True)),
                ("time_loaded", models.DateTimeField(blank=True, null=True)),
                ("time_en_route_to_delivery", models.DateTimeField(blank=True, null=True)),
                ("time_arrived_at_delivery", models.DateTimeField(blank=True, null=True)),
                ("time_completed", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["collection_time"],
            },
        ),
    ]
