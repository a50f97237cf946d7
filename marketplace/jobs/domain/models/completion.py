from django.db import models


class CompletionTracking(models.Model):
    """
    Completion, warranty and nudge bookkeeping shared by requests and bookings.

    Both parties mark the job complete independently. The buyer's confirmation
    starts the warranty; the nudge job reminds buyers who have not confirmed
    and closes the job without warranty after a week.
    """

    buyer_marked_complete = models.BooleanField(default=False)
    buyer_completion_date = models.DateTimeField(null=True, blank=True)
    seller_marked_complete = models.BooleanField(default=False)
    seller_completion_date = models.DateTimeField(null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)
    warranty_expires_at = models.DateTimeField(null=True, blank=True)

    nudge_count = models.PositiveSmallIntegerField(default=0)
    last_nudge_at = models.DateTimeField(null=True, blank=True)
    auto_closed = models.BooleanField(default=False)

    class Meta:
        abstract = True
