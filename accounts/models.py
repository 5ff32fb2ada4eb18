from typing import Any

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager
from django.db import models

from tools.validators import validate_hex_color


class UserManager(BaseUserManager):
    """
    Manager for the email-based user model.

    Methods:
        create_user(email, password=None, **extra_fields):
            Creates a user with a normalized email and a hashed password.
            Raises ValueError if email is not provided.

        create_invited_user(email):
            Creates an inactive account for someone invited into a workspace.
            The account has no usable password until the invite link is used.

        create_superuser(email, password=None, **extra_fields):
            Creates a user with `is_staff` and `is_superuser` set.
    """

    def create_user(self, email: str, password: str | None = None, **extra_fields: Any) -> 'User':
        if not email:
            raise ValueError("Email address must be specified")

        email = self.normalize_email(email)
        extra_fields.setdefault('is_active', True)

        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)

        return user

    def create_invited_user(self, email: str) -> 'User':
        user = self.model(email=self.normalize_email(email), is_active=False)
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def create_superuser(self, email: str, password: str | None = None, **extra_fields: Any) -> 'User':
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if not extra_fields.get('is_staff'):
            raise ValueError("Superuser must contain is_staff=True.")
        if not extra_fields.get('is_superuser'):
            raise ValueError("Superuser must contain is_superuser=True.")

        return self.create_user(email, password, **extra_fields)


class User(AbstractBaseUser, PermissionsMixin):
    """
    WorkNest account. Users sign in with email and password.

    The avatar is either an emoji on a colored background or an uploaded
    image (the image takes priority). When neither is customized, clients
    render `initials`.

    Fields:
        email (str): Unique email address used for authentication.
        first_name (str): Optional first name.
        last_name (str): Optional last name (surname).
        bio (str): Optional free-text description.
        avatar_background (str): HEX code for background color behind emoji avatar.
        avatar_emoji (str): Emoji used as a simple profile avatar.
        avatar_image (ImageField): Optional uploaded profile picture.
        is_active (bool): False for invited users who have not set a password yet.
        is_staff (bool): Designates whether the user can access the admin site.
        date_joined (datetime): Timestamp when the user registered.
    """

    email = models.EmailField(verbose_name="Email", unique=True)
    first_name = models.CharField(max_length=150, verbose_name="First Name", blank=True)
    last_name = models.CharField(max_length=150, verbose_name="Last Name", blank=True)
    bio = models.TextField(verbose_name="Bio", blank=True, null=True)
    avatar_background = models.CharField(
        max_length=7,
        verbose_name="Avatar Background",
        default="#ffffff",
        validators=[validate_hex_color],
        null=True,
        blank=True
    )
    avatar_emoji = models.CharField(max_length=3, verbose_name="Avatar Emoji", default="🚀")
    avatar_image = models.ImageField(
        upload_to="accounts/",
        verbose_name="Avatar Image",
        null=True,
        blank=True
    )
    is_active = models.BooleanField(verbose_name="Is Active", default=True)
    is_staff = models.BooleanField(verbose_name="Is Staff", default=False)
    date_joined = models.DateTimeField(verbose_name="Date Joined", auto_now_add=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['first_name', 'last_name']

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    def get_full_name(self) -> str:
        full_name = f"{self.first_name} {self.last_name}".strip()
        return full_name or self.email

    def get_short_name(self) -> str:
        return self.first_name or self.email

    @property
    def initials(self) -> str:
        parts = [p for p in (self.first_name, self.last_name) if p]
        if not parts:
            return self.email[:1].upper()
        return "".join(p[0] for p in parts).upper()

    def __str__(self) -> str:
        return self.email
