import logging

from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver

from .models import Examination

logger = logging.getLogger(__name__)


@receiver(pre_save, sender=Examination)
def remember_total_marks(sender, instance, **kwargs):
    """Keep the stored total so post_save can tell whether it changed."""
    if instance.pk is None:
        instance._previous_total_marks = None
        return
    instance._previous_total_marks = (
        Examination.objects.filter(pk=instance.pk).values_list('total_marks', flat=True).first()
    )


@receiver(post_save, sender=Examination)
def regrade_on_total_marks_change(sender, instance, created, **kwargs):
    """
    Recompute percentage, letter and GPA of every grade of the examination
    when its total marks change.
    """
    previous = getattr(instance, '_previous_total_marks', None)
    if created or previous is None or previous == instance.total_marks:
        return

    for grade in instance.grades.all():
        grade.examination = instance
        grade.save()
    logger.info("Regraded examination %s after total marks changed %s -> %s",
                instance.pk, previous, instance.total_marks)
