import io

from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.response import Response

from jobs.ingestion import decode_upload, read_upload

from .serializers import (
    JobSerializer,
    NotesUpdateSerializer,
    StatusUpdateSerializer,
    TimestampUpdateSerializer,
    UploadSerializer,
)
from .services import build_job_service


def job_response(record, http_status=status.HTTP_200_OK):
    return Response(JobSerializer(record.to_dict()).data, status=http_status)


class JobViewSet(viewsets.ViewSet):
    """
    Delivery jobs.
    - List / create
    - CSV upload (optionally replacing every existing job)
    - Status, notes and manual timestamp updates
    - Live ETA refresh from the routing provider

    Failures are raised as classified errors and rendered by
    logistics.exceptions.tracker_exception_handler.
    """

    def list(self, request):
        records = build_job_service().list_jobs()
        return Response(JobSerializer([record.to_dict() for record in records], many=True).data)

    def create(self, request):
        record = build_job_service().create(request.data)
        return job_response(record, status.HTTP_201_CREATED)

    @action(detail=False, methods=['post'], parser_classes=[MultiPartParser, FormParser])
    def upload(self, request):
        """
        Bulk create jobs from a CSV file. `replace=true` clears the board first.
        """
        serializer = UploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        content = decode_upload(serializer.validated_data['file'].read())
        rows = read_upload(io.StringIO(content))

        result = build_job_service().ingest(rows, replace_existing=serializer.validated_data['replace'])
        return Response(
            {
                "message": f"{result.inserted_count} jobs successfully uploaded.",
                "inserted_count": result.inserted_count,
                "skipped_count": result.skipped_count,
            },
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=['put'], url_path='status')
    def update_status(self, request, pk=None):
        serializer = StatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = build_job_service().update_status(pk, serializer.validated_data['status'])
        return job_response(record)

    @action(detail=True, methods=['put'], url_path='notes')
    def update_notes(self, request, pk=None):
        serializer = NotesUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = build_job_service().update_notes(pk, serializer.validated_data['notes'])
        return job_response(record)

    @action(detail=True, methods=['put'], url_path='timestamp')
    def update_timestamp(self, request, pk=None):
        """
        Manual correction of collection_time or one of the milestone timestamps.
        """
        serializer = TimestampUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = build_job_service().update_timestamp(
            pk, serializer.validated_data['field'], serializer.validated_data['new_time']
        )
        return job_response(record)

    @action(detail=True, methods=['get'], url_path='live-eta')
    def live_eta(self, request, pk=None):
        record = build_job_service().refresh_eta(pk)
        return job_response(record)
