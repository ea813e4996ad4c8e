"""
Email service for transactional emails.

Supports SMTP and console logging modes.
"""

import logging
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Optional

import aiosmtplib

logger = logging.getLogger(__name__)


class EmailDeliveryError(RuntimeError):
    """Raised when an email could not be handed to the provider."""


class EmailService:
    """
    Email service with multi-mode support.

    Modes:
        - console: Log emails to console (development)
        - smtp: Send via SMTP
    """

    def __init__(
        self,
        mode: str = "console",
        from_email: str = "noreply@fittrack.app",
        from_name: str = "FitTrack",
        frontend_url: str = "http://localhost:3000",
        smtp_host: Optional[str] = None,
        smtp_port: int = 587,
        smtp_user: Optional[str] = None,
        smtp_password: Optional[str] = None,
    ):
        """
        Initialize email service.

        Args:
            mode: "console" or "smtp"
            from_email: Sender email address
            from_name: Sender display name
            frontend_url: Base URL for links in emails
            smtp_host: SMTP server host
            smtp_port: SMTP server port
            smtp_user: SMTP username
            smtp_password: SMTP password
        """
        self._mode = mode
        self._from_email = from_email
        self._from_name = from_name
        self._frontend_url = frontend_url.rstrip("/")
        self._smtp_host = smtp_host
        self._smtp_port = smtp_port
        self._smtp_user = smtp_user
        self._smtp_password = smtp_password

        if self._mode == "smtp" and not self._smtp_host:
            logger.warning("SMTP host not configured, falling back to console mode")
            self._mode = "console"

        logger.info(f"Email service initialized in {self._mode} mode")

    @property
    def mode(self) -> str:
        return self._mode

    def build_reset_link(self, reset_token: str) -> str:
        """Frontend page that accepts the reset token."""
        return f"{self._frontend_url}/reset-password/{reset_token}"

    async def send_reset_token(self, user: dict, reset_token: str) -> None:
        """
        Deliver a password reset token to an account holder.

        Matches the reset sender hook of AuthService.

        Raises:
            EmailDeliveryError: provider rejected the message
        """
        result = await self.send_password_reset_email(
            to_email=user["email"],
            reset_link=self.build_reset_link(reset_token),
            user_name=user.get("firstName"),
        )
        if not result.get("success"):
            raise EmailDeliveryError(result.get("error", "Email delivery failed"))

    async def send_password_reset_email(
        self,
        to_email: str,
        reset_link: str,
        user_name: Optional[str] = None,
    ) -> dict:
        """
        Send password reset email.

        Args:
            to_email: Recipient email address
            reset_link: Link to the reset page
            user_name: User's first name (optional)

        Returns:
            dict with success status and message
        """
        name = user_name or "there"

        html_content = f"""
<!DOCTYPE html>
<html>
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
</head>
<body style="margin: 0; padding: 0; background-color: #f5f5f5; font-family: Arial, Helvetica, sans-serif; line-height: 1.6; color: #333333;">
    <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="background-color: #f5f5f5;">
        <tr>
            <td align="center" style="padding: 20px 0;">
                <table role="presentation" width="600" cellpadding="0" cellspacing="0" style="background-color: #ffffff; max-width: 600px;">
                    <tr>
                        <td align="center" bgcolor="#1F6FEB" style="background-color: #1F6FEB; padding: 40px 20px;">
                            <h1 style="margin: 0; font-size: 28px; color: #ffffff; font-weight: 600;">Reset your password</h1>
                        </td>
                    </tr>
                    <tr>
                        <td style="padding: 40px 30px;">
                            <p style="margin: 0 0 16px 0; font-size: 16px;">Hi {name},</p>
                            <p style="margin: 0 0 24px 0; font-size: 16px;">We received a request to reset your FitTrack password. The link below is valid for one hour:</p>
                            <p style="margin: 0 0 24px 0; font-size: 16px;"><a href="{reset_link}" target="_blank" style="color: #1F6FEB;">Reset Password</a></p>
                            <p style="margin: 0 0 24px 0; font-size: 14px; color: #666666; word-break: break-all;">{reset_link}</p>
                            <p style="margin: 0; font-size: 16px;">If you didn't request a password reset, you can safely ignore this email.</p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>
"""

        text_content = f"""
Reset your password

Hi {name},

We received a request to reset your FitTrack password. The link below is valid for one hour:

{reset_link}

If you didn't request a password reset, you can safely ignore this email.

The FitTrack Team
"""

        return await self._send(
            to=to_email,
            subject="Reset your FitTrack password",
            html=html_content,
            text=text_content,
        )

    async def _send(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Send email via configured provider."""
        if self._mode == "console":
            return self._send_console(to, subject, text)
        elif self._mode == "smtp":
            return await self._send_smtp(to, subject, html, text)
        else:
            logger.error(f"Unknown email mode: {self._mode}")
            return {"success": False, "error": f"Unknown email mode: {self._mode}"}

    def _send_console(self, to: str, subject: str, text: str) -> dict:
        """Log email to console (development mode)."""
        logger.info("=" * 60)
        logger.info("EMAIL (console mode)")
        logger.info(f"To: {to}")
        logger.info(f"Subject: {subject}")
        logger.info("-" * 60)
        logger.info(text)
        logger.info("=" * 60)

        return {
            "success": True,
            "mode": "console",
            "message": "Email logged to console",
        }

    async def _send_smtp(
        self,
        to: str,
        subject: str,
        html: str,
        text: str,
    ) -> dict:
        """Send email via SMTP."""
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{self._from_name} <{self._from_email}>"
        message["To"] = to
        message.attach(MIMEText(text, "plain"))
        message.attach(MIMEText(html, "html"))

        # Port 465 is implicit TLS, anything else upgrades with STARTTLS
        use_tls = self._smtp_port == 465

        try:
            await aiosmtplib.send(
                message,
                hostname=self._smtp_host,
                port=self._smtp_port,
                username=self._smtp_user,
                password=self._smtp_password,
                use_tls=use_tls,
                start_tls=not use_tls,
            )
        except aiosmtplib.SMTPException as e:
            logger.error(f"Failed to send email via SMTP: {e}")
            return {"success": False, "error": str(e)}

        logger.info("Email sent via SMTP")
        return {
            "success": True,
            "mode": "smtp",
            "message": "Email sent via SMTP",
        }
