from django.db import models


class School(models.Model):
    name = models.CharField(max_length=255)
    address = models.CharField(max_length=255, blank=True)
    logo = models.ImageField(upload_to='school_logos/', blank=True, null=True)
    academic_year = models.CharField(max_length=20, blank=True, help_text="e.g., 2024-2025")

    def __str__(self):
        return self.name
