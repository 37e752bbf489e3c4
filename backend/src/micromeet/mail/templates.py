"""HTML bodies for system-generated mail (invitations, password reset)."""

from html import escape

_FOOTER = """
  <hr style="border: none; border-top: 1px solid #eee; margin: 30px 0;" />
  <p style="color: #999; font-size: 12px;">
    Micromeet Invoices<br/>
    Email ini dikirim secara otomatis, mohon tidak membalas email ini.
  </p>
"""

_BUTTON = """
  <div style="text-align: center; margin: 30px 0;">
    <a href="{url}"
       style="background-color: #4F46E5; color: white; padding: 12px 30px;
              text-decoration: none; border-radius: 6px; display: inline-block;">
      {label}
    </a>
  </div>
"""

ROLE_LABELS = {"admin": "Admin", "member": "Anggota"}


def invitation_subject(organization_name: str) -> str:
    return f"Undangan Bergabung - {organization_name}"


def invitation_html(
    inviter_name: str,
    organization_name: str,
    role: str,
    invitation_url: str,
    expiry_days: int,
) -> str:
    role_label = ROLE_LABELS.get(role, role)
    return f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Undangan Bergabung</h2>
  <p>Halo,</p>
  <p><strong>{escape(inviter_name)}</strong> mengundang Anda untuk bergabung dengan
     <strong>{escape(organization_name)}</strong> sebagai <strong>{role_label}</strong>
     di Micromeet Invoices.</p>
  {_BUTTON.format(url=escape(invitation_url, quote=True), label="Terima Undangan")}
  <p style="color: #666; font-size: 14px;">
    Undangan ini berlaku selama {expiry_days} hari.<br/>
    Jika Anda tidak mengenal pengirim, abaikan email ini.
  </p>
  {_FOOTER}
</div>"""


PASSWORD_RESET_SUBJECT = "Reset Password - Micromeet Invoices"


def password_reset_html(user_name: str, reset_url: str, expiry_minutes: int) -> str:
    if expiry_minutes % 60 == 0:
        expiry = f"{expiry_minutes // 60} jam"
    else:
        expiry = f"{expiry_minutes} menit"
    return f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2 style="color: #333;">Halo {escape(user_name)},</h2>
  <p>Kami menerima permintaan untuk reset password akun Anda di Micromeet Invoices.</p>
  <p>Klik tombol di bawah ini untuk mengatur password baru:</p>
  {_BUTTON.format(url=escape(reset_url, quote=True), label="Reset Password")}
  <p style="color: #666; font-size: 14px;">
    Link ini akan kedaluwarsa dalam {expiry}.<br/>
    Jika Anda tidak meminta reset password, abaikan email ini.
  </p>
  {_FOOTER}
</div>"""
