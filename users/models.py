# users/models.py
from django.db import models


class Admin(models.Model):
    """
    Membership in the admins set. Keyed by the identity provider's uid;
    the email is a display copy taken from the provider when added.
    """
    uid = models.CharField(max_length=128, primary_key=True)
    email = models.EmailField()
    added_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["email"]

    def __str__(self):
        return self.email
