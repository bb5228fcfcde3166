# progress/serializers.py
from rest_framework import serializers


class LastTaskSerializer(serializers.Serializer):
    """Body of POST /api/user/last-task. Range is checked against the course size by the store."""
    taskId = serializers.IntegerField()


class DraftSerializer(serializers.Serializer):
    """
    Body of POST /api/tasks/{task_id}/text.
    Content is stored verbatim: blank allowed, whitespace kept.
    """
    content = serializers.CharField(allow_blank=True, trim_whitespace=False)
