import uuid

from django.db import models


class Learner(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)  # Opaque learner id
    username = models.CharField(max_length=150, unique=True)                     # Case-sensitive, 3+ chars
    last_task = models.PositiveIntegerField(default=1)                           # Last navigated task (1..N)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.username
