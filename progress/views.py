# progress/views.py
from __future__ import annotations

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import DraftSerializer, LastTaskSerializer
from .services import ProgressStore


class StoreView(APIView):
    """Base for views backed by the learner's ProgressStore (auth required)."""
    store = ProgressStore()

    @property
    def learner_id(self):
        return self.request.user.id


class ProgressView(StoreView):
    """GET /api/user/progress"""
    def get(self, request):
        snapshot = self.store.get_progress(self.learner_id)
        return Response(snapshot.as_response(), status=status.HTTP_200_OK)


class LastTaskView(StoreView):
    """POST /api/user/last-task"""
    def post(self, request):
        ser = LastTaskSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        self.store.set_last_task(self.learner_id, ser.validated_data["taskId"])
        return Response({"success": True}, status=status.HTTP_200_OK)


class TaskTextView(StoreView):
    """
    GET  /api/tasks/{task_id}/text -> {"content": ""} when nothing was saved yet
    POST /api/tasks/{task_id}/text  {"content": "..."}
    """
    def get(self, request, task_id: int):
        content = self.store.load_draft(self.learner_id, task_id)
        return Response({"content": content}, status=status.HTTP_200_OK)

    def post(self, request, task_id: int):
        ser = DraftSerializer(data=request.data or {})
        ser.is_valid(raise_exception=True)
        self.store.save_draft(self.learner_id, task_id, ser.validated_data["content"])
        return Response({"success": True}, status=status.HTTP_200_OK)


class TaskCompleteView(StoreView):
    """POST /api/tasks/{task_id}/complete (idempotent)"""
    def post(self, request, task_id: int):
        self.store.complete_task(self.learner_id, task_id)
        return Response({"success": True}, status=status.HTTP_200_OK)
