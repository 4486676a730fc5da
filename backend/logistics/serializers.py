from rest_framework import serializers


class JobSerializer(serializers.Serializer):
    """
    Read-only view of a JobRecord (serialized from JobRecord.to_dict()).
    """
    id = serializers.CharField()
    reference_number = serializers.CharField()
    customer_name = serializers.CharField()
    driver_name = serializers.CharField()
    collection_address = serializers.CharField()
    delivery_address = serializers.CharField()
    collection_time = serializers.DateTimeField()
    estimated_duration = serializers.IntegerField(allow_null=True)
    status = serializers.CharField()
    notes = serializers.CharField(allow_blank=True)
    time_en_route_to_collection = serializers.DateTimeField(allow_null=True)
    time_arrived_at_collection = serializers.DateTimeField(allow_null=True)
    time_loaded = serializers.DateTimeField(allow_null=True)
    time_en_route_to_delivery = serializers.DateTimeField(allow_null=True)
    time_arrived_at_delivery = serializers.DateTimeField(allow_null=True)
    time_completed = serializers.DateTimeField(allow_null=True)
    created_at = serializers.DateTimeField()
    updated_at = serializers.DateTimeField()


class StatusUpdateSerializer(serializers.Serializer):
    # free text on purpose: the lifecycle engine owns status validation
    status = serializers.CharField()


class NotesUpdateSerializer(serializers.Serializer):
    notes = serializers.CharField(allow_blank=True, trim_whitespace=False)


class TimestampUpdateSerializer(serializers.Serializer):
    field = serializers.CharField()
    new_time = serializers.CharField()


class UploadSerializer(serializers.Serializer):
    file = serializers.FileField()
    replace = serializers.BooleanField(default=False)
