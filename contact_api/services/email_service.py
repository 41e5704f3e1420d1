import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from contact_api.core.exceptions import MailTransportError, NotificationError

logger = logging.getLogger(__name__)

OWNER_SUBJECT = "New Contact Form Submission"
ACKNOWLEDGMENT_SUBJECT = "Thank you for contacting!"
TEST_SUBJECT = "Test Email"


def build_message(sender: str, to_email: str, subject: str, body: str, subtype: str = "plain") -> MIMEMultipart:
    msg = MIMEMultipart()
    msg['From'] = sender
    msg['To'] = to_email
    msg['Subject'] = subject
    msg.attach(MIMEText(body, subtype, "utf-8"))
    return msg


class SMTPMailTransport:
    """
    Sends messages through an authenticated SMTP relay (STARTTLS).
    Blocking; every call opens and closes its own connection.
    """

    def __init__(self, host: str, port: int, username: str, password: str, timeout: float = 10):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings):
        return cls(
            host=settings.SMTP_SERVER,
            port=settings.SMTP_PORT,
            username=settings.OWNER_EMAIL,
            password=settings.OWNER_PASS,
            timeout=settings.SMTP_TIMEOUT,
        )

    def send(self, from_email: str, to_email: str, msg: MIMEMultipart):
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.sendmail(from_email, to_email, msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            raise MailTransportError(f"Failed to send email to {to_email}: {e}") from e


class NotificationSender:
    """Owner alert plus submitter acknowledgment for each accepted submission."""

    def __init__(self, transport, owner_email: str, owner_name: str, sender_label: str = "Portfolio Contact"):
        self.transport = transport
        self.owner_email = owner_email
        self.owner_name = owner_name
        self.sender_label = sender_label

    @classmethod
    def from_settings(cls, settings, transport=None):
        return cls(
            transport=transport or SMTPMailTransport.from_settings(settings),
            owner_email=settings.OWNER_EMAIL,
            owner_name=settings.OWNER_NAME,
            sender_label=settings.MAIL_SENDER_LABEL,
        )

    def owner_notification(self, name: str, email: str, message: str) -> MIMEMultipart:
        body = f"Name: {name}\nEmail: {email}\nMessage: {message}"
        sender = formataddr((self.sender_label, self.owner_email))
        return build_message(sender, self.owner_email, OWNER_SUBJECT, body)

    def acknowledgment(self, name: str, email: str, message: str) -> MIMEMultipart:
        safe_name = html.escape(name)
        safe_message = html.escape(message).replace("\n", "<br/>")
        safe_owner = html.escape(self.owner_name)
        body = f"""
        <p>Hi {safe_name},</p>
        <p>Thank you for reaching out to me. I've received your message and will get back to you shortly.</p>
        <p><b>Your Message:</b><br/>{safe_message}</p>
        <br/>
        <p>Best regards,<br/>{safe_owner}</p>
        """
        sender = formataddr((self.owner_name, self.owner_email))
        return build_message(sender, email, ACKNOWLEDGMENT_SUBJECT, body, "html")

    def notify(self, name: str, email: str, message: str):
        """Send both emails in order. The second is skipped once the first fails."""
        try:
            self.transport.send(self.owner_email, self.owner_email, self.owner_notification(name, email, message))
            self.transport.send(self.owner_email, email, self.acknowledgment(name, email, message))
        except Exception as e:
            logger.error(f"❌ Email sending error: {e}")
            raise NotificationError(e) from e

        logger.info(f"✅ Email sent to owner and user ({email})")

    def send_test_email(self):
        sender = formataddr(("Test", self.owner_email))
        msg = build_message(sender, self.owner_email, TEST_SUBJECT, "This is a test email from backend.")
        try:
            self.transport.send(self.owner_email, self.owner_email, msg)
        except Exception as e:
            logger.error(f"❌ Test email failed: {e}")
            raise NotificationError(e) from e
