"""
Email Service using Resend

Sends the portal's transactional emails:
- Offer expiration warnings (2 days, 1 day) and expiry notices to the offer
  creator and the offer's notification addresses
- Application confirmation to applicants
- Admin test email

All user-supplied values are HTML-escaped before interpolation.
"""

import asyncio
import logging
from datetime import date
from html import escape

import resend

from hr_portal.core.config import settings

logger = logging.getLogger(__name__)

# Initialize Resend with API key
resend.api_key = settings.resend_api_key

EMAIL_FROM = settings.email_from
FRONTEND_URL = settings.frontend_url

_STYLE = """
        <style>
            body {{ font-family: Arial, sans-serif; line-height: 1.6; color: #495057; }}
            .container {{ max-width: 600px; margin: 0 auto; padding: 20px; }}
            .banner {{ background-color: {banner_bg}; padding: 20px; border-radius: 8px; margin-bottom: 20px; }}
            .banner h2 {{ color: {banner_fg}; margin: 0; }}
            .card {{ padding: 20px; background-color: #ffffff; border: 1px solid #dee2e6; border-radius: 8px; }}
            .info-box {{ background-color: {box_bg}; padding: 15px; border-radius: 5px; margin: 20px 0; border-left: 4px solid {box_border}; }}
            .info-box p {{ margin: 5px 0; }}
            .footer {{ margin-top: 30px; padding-top: 20px; border-top: 1px solid #dee2e6; color: #6c757d; font-size: 12px; }}
        </style>
"""


def _render(title: str, body: str, banner_bg: str, banner_fg: str, box_bg: str, box_border: str) -> str:
    style = _STYLE.format(
        banner_bg=banner_bg,
        banner_fg=banner_fg,
        box_bg=box_bg,
        box_border=box_border,
    )
    return f"""
    <!DOCTYPE html>
    <html>
    <head>{style}</head>
    <body>
        <div class="container">
            <div class="banner"><h2>{title}</h2></div>
            <div class="card">
                {body}
            </div>
        </div>
    </body>
    </html>
    """


async def send_email(
    to_email: str,
    subject: str,
    html_content: str,
) -> bool:
    """
    Send an email using Resend.

    Args:
        to_email: Recipient email address
        subject: Email subject line
        html_content: HTML content of the email

    Returns:
        True if email was sent successfully
    """
    if not resend.api_key:
        logger.warning("RESEND_API_KEY not set - logging email instead of sending")
        logger.info(f"EMAIL TO: {to_email} | SUBJECT: {subject}")
        return True

    try:
        params: resend.Emails.SendParams = {
            "from": EMAIL_FROM,
            "to": [to_email],
            "subject": subject,
            "html": html_content,
        }

        # Run sync Resend call in thread pool to avoid blocking event loop
        email = await asyncio.to_thread(resend.Emails.send, params)
        logger.info(f"Email sent successfully to {to_email}, id: {email['id']}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email to {to_email}: {e}")
        return False


class EmailNotifier:
    """Notification dispatcher used by the lifecycle engine."""

    async def send(self, to: str, subject: str, html: str) -> bool:
        return await send_email(to_email=to, subject=subject, html_content=html)


# ============================================
# Offer expiration notices
# ============================================


def expiration_warning_subject(offer_title: str, days_remaining: int) -> str:
    if days_remaining == 1:
        return f"Offer Expiring Tomorrow: {offer_title}"
    return f"Offer Expiring in {days_remaining} Days: {offer_title}"


def offer_expired_subject(offer_title: str) -> str:
    return f"Offer Expired: {offer_title}"


def render_expiration_warning(
    recipient_name: str,
    offer_title: str,
    deadline: date,
    days_remaining: int,
) -> str:
    """Warning sent 2 days and 1 day before an offer's deadline."""
    urgent = days_remaining == 1
    title = "Offer Expiring Tomorrow" if urgent else f"Offer Expiring in {days_remaining} Days"
    plural = "s" if days_remaining > 1 else ""

    body = f"""
                <p>Hello <strong>{escape(recipient_name)}</strong>,</p>

                <p>Your job offer is approaching its deadline:</p>

                <div class="info-box">
                    <p><strong>Offer:</strong> {escape(offer_title)}</p>
                    <p><strong>Deadline:</strong> {deadline.isoformat()}</p>
                    <p><strong>Time Remaining:</strong> {days_remaining} day{plural}</p>
                </div>

                <p><strong>Recommended Actions:</strong></p>
                <ul>
                    <li>Review current applications</li>
                    <li>Extend the deadline if you need more candidates</li>
                    <li>Prepare for application processing when the offer expires</li>
                </ul>

                <p>Please log into the HR portal at <a href="{FRONTEND_URL}">{FRONTEND_URL}</a> to take the necessary actions.</p>

                <div class="footer">
                    <p>This is an automated notification from the HR Job Portal</p>
                </div>
    """
    return _render(
        title,
        body,
        banner_bg="#f8d7da" if urgent else "#fff3cd",
        banner_fg="#721c24" if urgent else "#856404",
        box_bg="#f8d7da" if urgent else "#fff3cd",
        box_border="#dc3545" if urgent else "#ffc107",
    )


def render_offer_expired(recipient_name: str, offer_title: str, deadline: date) -> str:
    """Notice sent once an offer's deadline has passed."""
    body = f"""
                <p>Hello <strong>{escape(recipient_name)}</strong>,</p>

                <p>Your job offer has reached its deadline and has now expired:</p>

                <div class="info-box">
                    <p><strong>Offer:</strong> {escape(offer_title)}</p>
                    <p><strong>Deadline:</strong> {deadline.isoformat()}</p>
                    <p><strong>Status:</strong> Expired</p>
                </div>

                <p><strong>Recommended Actions:</strong></p>
                <ul>
                    <li>Review and process any pending applications</li>
                    <li>Download the application archive within 14 days</li>
                    <li>Create a new offer if needed</li>
                </ul>

                <div class="footer">
                    <p>This is an automated notification from the HR Job Portal</p>
                </div>
    """
    return _render(
        "Offer Expired",
        body,
        banner_bg="#f8d7da",
        banner_fg="#721c24",
        box_bg="#f8d7da",
        box_border="#dc3545",
    )


# ============================================
# Applicant emails
# ============================================


def render_applicant_confirmation(applicant_name: str, offer_title: str, submitted_on: date) -> str:
    body = f"""
                <p>Dear <strong>{escape(applicant_name)}</strong>,</p>

                <p>Thank you for your application! We have successfully received your submission for:</p>

                <div class="info-box">
                    <p><strong>Position:</strong> {escape(offer_title)}</p>
                    <p><strong>Submitted:</strong> {submitted_on.isoformat()}</p>
                </div>

                <p>Our HR team will review your application and contact you if your profile matches our requirements.</p>

                <p><strong>Next Steps:</strong></p>
                <ul>
                    <li>Your application is now under review</li>
                    <li>We will contact you if you are selected for the next stage</li>
                    <li>Please keep your contact information up to date</li>
                </ul>

                <div class="footer">
                    <p>Best regards,<br>HR Team<br>Job Portal System</p>
                </div>
    """
    return _render(
        "Application Submitted Successfully",
        body,
        banner_bg="#d4edda",
        banner_fg="#155724",
        box_bg="#e9ecef",
        box_border="#28a745",
    )


async def send_applicant_confirmation(
    to_email: str,
    applicant_name: str,
    offer_title: str,
    submitted_on: date,
) -> bool:
    """Send the submission receipt to an applicant."""
    return await send_email(
        to_email=to_email,
        subject=f"Application Confirmation: {offer_title}",
        html_content=render_applicant_confirmation(applicant_name, offer_title, submitted_on),
    )


# ============================================
# Admin test email
# ============================================


def render_test_email(message: str, sender: str, sent_at: str) -> str:
    body = f"""
                <p>Hello,</p>

                <p>{escape(message)}</p>

                <div class="footer">
                    <p>This is a test email sent from the HR Job Portal<br>
                    Sent by: {escape(sender)}<br>
                    Time: {escape(sent_at)}</p>
                </div>
    """
    return _render(
        "Test Email",
        body,
        banner_bg="#f8f9fa",
        banner_fg="#343a40",
        box_bg="#e9ecef",
        box_border="#6c757d",
    )
