"""
MJML Email Templates
Booking and membership emails, compiled to HTML by email_service
"""

from html import escape
from typing import Optional

# Community theme colors - Charcoal/Gold
THEME = {
    "primary": "#b8860b",
    "primary_dark": "#8b6508",
    "background": "#f5f5f4",
    "card_bg": "#ffffff",
    "text_primary": "#1c1917",
    "text_secondary": "#44403c",
    "text_muted": "#78716c",
    "border": "#e7e5e4",
}


def get_base_template(
    title: str,
    preview_text: str,
    content_sections: str,
    cta_url: Optional[str] = None,
    cta_label: Optional[str] = None,
) -> str:
    """Base MJML template wrapper for all emails"""

    cta_section = ""
    if cta_url and cta_label:
        cta_section = f"""
        <mj-section padding="20px 0">
          <mj-column>
            <mj-button
              href="{cta_url}"
              background-color="{THEME['primary']}"
              color="#ffffff"
              font-weight="600"
              border-radius="8px"
              padding="18px 40px"
              font-size="16px">
              {cta_label}
            </mj-button>
          </mj-column>
        </mj-section>
        """

    return f"""
    <mjml>
      <mj-head>
        <mj-title>{title}</mj-title>
        <mj-preview>{preview_text}</mj-preview>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <mj-section background-color="{THEME['card_bg']}" padding="40px 40px 48px 40px">
          <mj-column>
            <mj-text font-size="24px" font-weight="600" color="{THEME['text_primary']}" line-height="1.3" padding="0 0 16px 0">
              {title}
            </mj-text>

            {content_sections}
          </mj-column>
        </mj-section>

        {cta_section}

        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#a8a29e" padding="0">
              Raven Community
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def _credentials_block(email: str, password: str) -> str:
    return f"""
    <mj-text padding="0 0 0 20px">
      Username: <strong>{escape(email)}</strong><br/>
      Password: <strong>{escape(password)}</strong>
    </mj-text>

    <mj-text color="{THEME['text_muted']}">
      Please change your password after your first login.
    </mj-text>
    """


def booking_confirmation_template(client_name: str, service: str, when_label: str) -> str:
    content = f"""
    <mj-text>
      Hi {client_name},
    </mj-text>

    <mj-text>
      Your <strong>{service}</strong> appointment is booked for
      <strong>{when_label}</strong>.
    </mj-text>

    <mj-text color="{THEME['text_muted']}">
      Need to change it? Just reply to this email.
    </mj-text>
    """
    return get_base_template(
        title="Appointment Confirmed",
        preview_text=f"{service} on {when_label}",
        content_sections=content,
    )


def membership_approved_template(name: str, login_url: str) -> str:
    content = f"""
    <mj-text>
      Hi {name},
    </mj-text>

    <mj-text>
      Your membership request has been approved. Your existing account now
      has member access.
    </mj-text>
    """
    return get_base_template(
        title="Membership Approved",
        preview_text="Your membership request has been approved",
        content_sections=content,
        cta_url=login_url,
        cta_label="Log In",
    )


def member_welcome_template(name: str, email: str, password: str, login_url: str) -> str:
    content = f"""
    <mj-text>
      Hi {name},
    </mj-text>

    <mj-text>
      Welcome to the Raven Community! Your account has been approved. Here are
      your login credentials:
    </mj-text>
    {_credentials_block(email, password)}
    """
    return get_base_template(
        title="Welcome to the Raven Community!",
        preview_text="Your account has been approved",
        content_sections=content,
        cta_url=login_url,
        cta_label="Log In",
    )


def a_team_approved_template(name: str, login_url: str) -> str:
    content = f"""
    <mj-text>
      Hi {name},
    </mj-text>

    <mj-text>
      Your A-Team application has been approved. Your account now has A-Team
      access.
    </mj-text>
    """
    return get_base_template(
        title="Welcome to the A-Team",
        preview_text="Your application has been approved",
        content_sections=content,
        cta_url=login_url,
        cta_label="Log In",
    )


def a_team_welcome_template(name: str, email: str, password: str, login_url: str) -> str:
    content = f"""
    <mj-text>
      Hi {name},
    </mj-text>

    <mj-text>
      Your A-Team application has been approved and an account has been
      created for you. Your temporary credentials:
    </mj-text>
    {_credentials_block(email, password)}
    """
    return get_base_template(
        title="Welcome to the A-Team",
        preview_text="Your application has been approved",
        content_sections=content,
        cta_url=login_url,
        cta_label="Log In",
    )
