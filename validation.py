# validation.py
"""
Data-entry checks for samples coming from the form or a bulk upload.
The HMPI engine assumes clean numbers; this is where they get cleaned.
"""
import io
import math
from datetime import date

import pandas as pd

from exporters import TEMPLATE_HEADERS

REQUIRED_FIELDS = ['sample_code', 'project_id', 'latitude', 'longitude', 'metal', 'concentration']

INVALID_FORMAT_MESSAGE = 'Invalid file format. Please use the provided template.'

# Upload template column -> sample field
TEMPLATE_FIELD_MAP = {
    'SampleID': 'sample_code',
    'ProjectID': 'project_id',
    'District': 'district',
    'City': 'city',
    'Latitude': 'latitude',
    'Longitude': 'longitude',
    'Metal': 'metal',
    'Concentration': 'concentration',
    'Ii': 'ideal_value',
    'Mi': 'weight',
    'Date': 'date_collected',
}


def _to_float(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    # NaN and infinities cannot be scored
    return number if math.isfinite(number) else None


def _to_project_id(value):
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def validate_sample(data, project_ids):
    """
    Returns a list of human-readable problems with one sample entry.
    An empty list means the entry can be saved.
    """
    missing = [field for field in REQUIRED_FIELDS if _is_blank(data.get(field))]
    if missing:
        return [f"Missing required fields: {', '.join(missing)}"]

    errors = []
    if _to_project_id(data['project_id']) not in project_ids:
        errors.append('Invalid project ID')

    lat = _to_float(data.get('latitude'))
    lng = _to_float(data.get('longitude'))
    if lat is None or lat < -90 or lat > 90:
        errors.append('Invalid latitude')
    if lng is None or lng < -180 or lng > 180:
        errors.append('Invalid longitude')

    concentration = _to_float(data.get('concentration'))
    if concentration is None or concentration < 0:
        errors.append('Invalid concentration value')

    # Ii / Mi are optional overrides, but must be positive when given
    for field, label in (('ideal_value', 'Ii'), ('weight', 'Mi')):
        if not _is_blank(data.get(field)):
            number = _to_float(data.get(field))
            if number is None or number <= 0:
                errors.append(f'Invalid {label} value')

    if not _is_blank(data.get('date_collected')):
        try:
            date.fromisoformat(str(data['date_collected']).strip())
        except ValueError:
            errors.append('Invalid date')
    return errors


def clean_sample(data):
    """Typed copy of a validated entry, ready for the store."""
    collected = data.get('date_collected')
    return {
        'sample_code': str(data['sample_code']).strip(),
        'project_id': _to_project_id(data['project_id']),
        'metal': str(data['metal']).strip(),
        'concentration': float(data['concentration']),
        'latitude': float(data['latitude']),
        'longitude': float(data['longitude']),
        'date_collected': str(collected).strip() if not _is_blank(collected) else date.today().isoformat(),
        'ideal_value': _to_float(data.get('ideal_value')),
        'weight': _to_float(data.get('weight')),
    }


def parse_upload(file_bytes):
    """
    Reads an uploaded template CSV into a list of sample dicts.
    Rows with an empty SampleID are skipped.
    """
    try:
        df = pd.read_csv(io.BytesIO(file_bytes), dtype=str, keep_default_na=False, skipinitialspace=True)
    except (UnicodeDecodeError, pd.errors.EmptyDataError, pd.errors.ParserError):
        raise ValueError(INVALID_FORMAT_MESSAGE)
    df.columns = [str(c).strip() for c in df.columns]
    if len(df.columns) != len(TEMPLATE_HEADERS):
        raise ValueError(INVALID_FORMAT_MESSAGE)
    df.columns = TEMPLATE_HEADERS
    df = df.rename(columns=TEMPLATE_FIELD_MAP)
    for column in df.columns:
        df[column] = df[column].astype(str).str.strip()
    df = df[df['sample_code'] != '']
    return df.to_dict('records')
