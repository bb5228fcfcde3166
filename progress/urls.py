from django.urls import path
from .views import LastTaskView, ProgressView, TaskCompleteView, TaskTextView

urlpatterns = [
    path("user/progress", ProgressView.as_view(), name="user-progress"),
    path("user/last-task", LastTaskView.as_view(), name="user-last-task"),
    path("tasks/<int:task_id>/text", TaskTextView.as_view(), name="task-text"),
    path("tasks/<int:task_id>/complete", TaskCompleteView.as_view(), name="task-complete"),
]
