"""
Campaign Renderer
=================

Turns a campaign plus the current job list into one complete HTML email with
inline CSS. Colours come from the EMAIL_STYLE config, brand details from
EMAIL_BRAND_NAME / EMAIL_UNSUBSCRIBE_ADDRESS.

Campaign content is embedded as-is and job fields are not escaped: both are
operator-entered HTML.
"""

import logging
from flask import current_app

logger = logging.getLogger(__name__)

DEFAULT_STYLE = {
    'text': '#333333',
    'text_secondary': '#6b7280',
    'heading': '#2563eb',
    'subheading': '#1e40af',
    'border': '#e5e7eb',
    'btn_bg': '#2563eb',
    'btn_text': '#ffffff',
    'font': 'Arial, sans-serif',
}


def _get_style():
    """Get email style from app config or defaults"""
    try:
        custom = current_app.config.get('EMAIL_STYLE', {})
        style = dict(DEFAULT_STYLE)
        style.update(custom)
        return style
    except RuntimeError:
        return dict(DEFAULT_STYLE)


def _get_brand():
    """Get brand info from app config"""
    try:
        return {
            'name': current_app.config.get('EMAIL_BRAND_NAME', 'Jobberway'),
            'unsubscribe_address': current_app.config.get('EMAIL_UNSUBSCRIBE_ADDRESS', 'unsubscribe@jobberway.com'),
        }
    except RuntimeError:
        return {'name': 'Jobberway', 'unsubscribe_address': 'unsubscribe@jobberway.com'}


def render_job(job, style):
    """Render a single job posting block"""
    return f'''
            <div style="margin-bottom:30px;padding:20px;border:1px solid {style['border']};border-radius:8px;">
              <h3 style="color:{style['subheading']};margin:0 0 10px 0;">{job['title']}</h3>
              <p style="margin:5px 0;"><strong>{job['company']}</strong> - {job['location']}</p>
              <p style="margin:10px 0;">{job['description']}</p>
              <a href="{job['url']}" style="display:inline-block;padding:10px 20px;background-color:{style['btn_bg']};color:{style['btn_text']};text-decoration:none;border-radius:4px;">Apply Now</a>
            </div>'''


def render_campaign(campaign, jobs, style=None, brand=None):
    """Render a campaign and its job list into a complete HTML email.

    Args:
        campaign: campaign dict with name, subject and content
        jobs: ordered sequence of job dicts (may be empty)
        style: colour overrides (defaults to app EMAIL_STYLE)
        brand: brand overrides (defaults to app config)

    Returns:
        Complete HTML email string with all inline CSS
    """
    style = style or _get_style()
    brand = brand or _get_brand()

    jobs_html = ''.join(render_job(job, style) for job in jobs)

    return f'''<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{campaign['subject']}</title>
  </head>
  <body style="font-family:{style['font']};line-height:1.6;color:{style['text']};max-width:600px;margin:0 auto;padding:20px;">
    <h1 style="color:{style['heading']};">{campaign['name']}</h1>
    <div style="margin:20px 0;">{campaign['content']}</div>
    <h2 style="color:{style['subheading']};">Latest Jobs</h2>
    <div class="jobs">{jobs_html}
    </div>
    <div style="margin-top:30px;padding-top:20px;border-top:1px solid {style['border']};font-size:12px;color:{style['text_secondary']};">
      <p>You are receiving this email because you subscribed to job updates from {brand['name']}.</p>
      <p>To unsubscribe, please reply with "unsubscribe" in the subject line or write to <a href="mailto:{brand['unsubscribe_address']}" style="color:{style['text_secondary']};">{brand['unsubscribe_address']}</a>.</p>
    </div>
  </body>
</html>'''
