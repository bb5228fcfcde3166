from django.db import models

from learners.models import Learner


class Draft(models.Model):
    learner = models.ForeignKey(Learner, on_delete=models.CASCADE, related_name="drafts")
    task_id = models.PositiveIntegerField()                 # Course task (1..N)
    content = models.TextField(blank=True, default="")      # Latest saved text, last write wins
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["learner", "task_id"], name="uq_draft_learner_task"),
        ]


class TaskProgress(models.Model):
    learner = models.ForeignKey(Learner, on_delete=models.CASCADE, related_name="progress")
    task_id = models.PositiveIntegerField()
    completed = models.BooleanField(default=False)          # Never reset once true
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["learner", "task_id"], name="uq_progress_learner_task"),
        ]
        indexes = [
            models.Index(fields=["learner", "completed"], name="idx_progress_completed"),
        ]
