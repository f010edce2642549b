"""Receipt email markup (Jinja2, autoescaped)."""
from jinja2 import Environment, select_autoescape

from notestore.core.config import settings
from notestore.utils.currency import format_inr

_env = Environment(autoescape=select_autoescape(default=True, default_for_string=True))

_RECEIPT = _env.from_string(
    """\
<div style="max-width: 600px; margin: 20px auto; font-family: sans-serif; border: 1px solid #eee; border-radius: 10px; overflow: hidden;">
  <div style="background: linear-gradient(135deg, #0f0c29, #302b63); padding: 30px; text-align: center;">
    <h1 style="color: white; margin: 0; font-size: 24px;">Order Confirmed</h1>
  </div>
  <div style="padding: 30px; background: white;">
    <p>Hi <strong>{{ name }}</strong>,</p>
    <p>Thank you for your purchase! Your notes are ready.</p>
    <table style="width: 100%; border-collapse: collapse; margin: 20px 0;">
      <thead><tr style="color: #64748b; font-size: 12px; text-transform: uppercase;"><th style="text-align: left;">Item</th><th style="text-align: right;">Qty</th></tr></thead>
      <tbody>
      {% for title in items %}
        <tr style="border-bottom: 1px solid #f1f5f9;">
          <td style="padding: 12px 0; color: #334155;">{{ title }}</td>
          <td style="padding: 12px 0; color: #334155; text-align: right;">1</td>
        </tr>
      {% endfor %}
      </tbody>
      <tfoot><tr><td style="padding-top: 15px; font-weight: bold;">Total Paid</td><td style="padding-top: 15px; font-weight: bold; text-align: right; color: #16a34a;">{{ total }}</td></tr></tfoot>
    </table>
    <div style="text-align: center; margin-top: 30px;">
      <a href="{{ dashboard_url }}" style="background: #db2777; color: white; text-decoration: none; padding: 12px 30px; border-radius: 25px; font-weight: bold;">Go to Dashboard</a>
    </div>
  </div>
</div>
"""
)


def render_receipt(name: str, items: list[str], total: int) -> str:
    return _RECEIPT.render(
        name=name,
        items=items,
        total=format_inr(total),
        dashboard_url=f"{settings.public_base_url.rstrip('/')}/dashboard",
    )
