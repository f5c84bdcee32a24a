"""
Job payload validation.
"""

JOB_FIELDS = ('title', 'description', 'company', 'category', 'location', 'url')


def validate_job(data):
    """Check a job payload. Returns (job, errors); job is None when errors is non-empty."""
    if not isinstance(data, dict):
        return None, {'_': 'Expected a JSON object'}

    job = {}
    errors = {}
    for field in JOB_FIELDS:
        value = data.get(field)
        if not isinstance(value, str) or not value.strip():
            errors[field] = 'Required'
        else:
            job[field] = value.strip()

    if errors:
        return None, errors
    return job, {}
