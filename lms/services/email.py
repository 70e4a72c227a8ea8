import asyncio
import os
import logging
from datetime import datetime
from jinja2 import Environment, FileSystemLoader, select_autoescape
from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail, To

from lms.core.config import settings

logger = logging.getLogger(__name__)


class EmailDeliveryError(Exception):
    pass


class EmailService:
    _template_env = None

    @classmethod
    def _get_template_env(cls):
        if cls._template_env is None:
            template_dir = os.path.join(
                os.path.dirname(os.path.abspath(__file__)),
                '..',
                'templates'
            )

            cls._template_env = Environment(
                loader=FileSystemLoader(template_dir),
                autoescape=select_autoescape(['html']),
                enable_async=False
            )
        return cls._template_env

    @classmethod
    def render_template(cls, template_name: str, context: dict) -> str:
        """
        Render an email template

        :param template_name: Name of the template file
        :param context: Dictionary of template variables
        :return: Rendered HTML template
        """
        try:
            default_context = {
                'company_name': settings.EMAILS_FROM_NAME,
                'frontend_url': settings.FRONTEND_BASE_URL,
                'current_year': datetime.now().year,
                **context
            }

            template_env = cls._get_template_env()
            template = template_env.get_template(template_name)
            return template.render(**default_context)
        except Exception as e:
            logger.error(f"Error rendering email template {template_name}: {e}")
            raise

    @classmethod
    def is_configured(cls) -> bool:
        return bool(settings.SENDGRID_API_KEY)

    @classmethod
    async def send_email(
        cls,
        to_email: str,
        subject: str,
        template_name: str,
        template_context: dict,
    ):
        html_content = cls.render_template(template_name, template_context)
        await cls._send_email_via_sendgrid(to_email, subject, html_content)

    @classmethod
    async def _send_email_via_sendgrid(cls, to_email: str, subject: str, html_content: str):
        from_email = (
            f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
            if settings.EMAILS_FROM_NAME
            else settings.EMAILS_FROM_EMAIL
        )

        message = Mail(
            from_email=from_email,
            to_emails=To(to_email),
            subject=subject,
            html_content=html_content
        )

        sendgrid_client = SendGridAPIClient(settings.SENDGRID_API_KEY)
        # The SendGrid client is blocking; keep it off the event loop
        response = await asyncio.to_thread(sendgrid_client.send, message)

        if response.status_code not in [200, 201, 202]:
            logger.error(f"SendGrid error: {response.status_code} - {response.body}")
            raise EmailDeliveryError(f"SendGrid API error: {response.status_code}")

        logger.info(f"Email sent successfully to {to_email} via SendGrid")
