from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.validators import RegexValidator
from django.db import models
import uuid


DEFAULT_CURRENCY = 'INR'

currency_validator = RegexValidator(
    regex=r'^[A-Z]{3}$',
    message='Currency must be a three-letter ISO 4217 code'
)


class UserManager(BaseUserManager):
    """Manager for users identified by email."""

    def create_user(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError('Email is required')

        user = self.model(email=self.normalize_email(email).lower(), **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if not (extra_fields['is_staff'] and extra_fields['is_superuser']):
            raise ValueError('Superuser must have is_staff and is_superuser set')

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """Account that owns personal expenses and joins expense groups."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    email = models.EmailField(unique=True, max_length=255)
    display_name = models.CharField(max_length=100, blank=True)

    # Amounts in notifications addressed to this user are rendered in it
    currency = models.CharField(
        max_length=3,
        default=DEFAULT_CURRENCY,
        validators=[currency_validator]
    )

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    last_login = models.DateTimeField(null=True, blank=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    class Meta:
        db_table = 'users'
        ordering = ['email']

    def __str__(self):
        return self.email

    def get_display_name(self):
        """Display name, falling back to the local part of the email."""
        return self.display_name or self.email.split('@')[0]
