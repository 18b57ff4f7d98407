import uuid

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from quizbank.sysutils.constants import UserRole, choices

from .manager import AccountManager


def avatar_upload_to(instance, filename):
    # One folder per user, the owner is the only writer
    return f"avatars/{instance.pk}/{filename}"


class User(AbstractBaseUser, PermissionsMixin):
    '''Platform account. Role is either admin or user.'''
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(max_length=254, unique=True)
    name = models.CharField(max_length=255)
    avatar = models.ImageField(upload_to=avatar_upload_to, null=True, blank=True)
    role = models.CharField(max_length=20, choices=choices(UserRole), default=UserRole.USER.value)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = AccountManager()

    USERNAME_FIELD = 'email'
    EMAIL_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        indexes = [
            models.Index(fields=["role"], name="accounts_user_role_idx"),
        ]

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value

    def __str__(self):
        return self.name
