import logging

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from rest_framework_simplejwt.tokens import RefreshToken

logger = logging.getLogger(__name__)


def send_templated_email(subject: str, body: str, template: str, context: dict, to: list) -> None:
    html_content = render_to_string(template, context)

    email_message = EmailMultiAlternatives(
        subject=subject,
        body=body,
        from_email=settings.DEFAULT_FROM_EMAIL,
        to=to,
    )
    email_message.attach_alternative(html_content, "text/html")
    email_message.send()


def send_invite_email(user, workspace) -> None:
    """
    Emails an invited (inactive) user a link to set their password.

    The link carries a JWT access token consumed by the `set-password/` endpoint.
    """

    token = RefreshToken.for_user(user).access_token
    set_password_link = f"{settings.FRONTEND_URL}/accounts/set-password/?token={token}"

    send_templated_email(
        subject=f"You have been invited to {workspace.name}",
        body=f"You have been invited to workspace {workspace.name}. "
             f"Follow the link to set a password: {set_password_link}",
        template="emails/set_password_email.html",
        context={"workspace_name": workspace.name, "reset_link": set_password_link},
        to=[user.email],
    )
    logger.info("Invite email sent to %s for workspace %s", user.email, workspace.id)


def send_password_reset_email(email: str, code: str) -> None:
    send_templated_email(
        subject="Password recovery",
        body=f"Your password recovery code: {code}",
        template="emails/password_reset_email.html",
        context={"code": code},
        to=[email],
    )
