# report_builder.py
"""
Aggregation and compliance roll-ups over stored samples.

Every function takes a snapshot sequence of samples (rows from the store,
i.e. dicts, or any object with the same attribute names) and returns new
objects. Samples already carry their stored hmpi_value and risk_level; nothing
here recomputes them.
"""
from collections import Counter, namedtuple
from datetime import date

from hmpi_engine import risk_color
from standards_config import ALERT_PRIORITIES, HIGH_RISK_TIERS, STANDARDS

Summary = namedtuple('Summary', [
    'count', 'average_index', 'risk_tier_counts', 'metal_counts', 'metal_average_index'
])

ALERT_FILTERS = ('all', 'active', 'acknowledged', 'resolved', 'high', 'medium', 'low')


def _field(record, name):
    if isinstance(record, dict):
        return record.get(name)
    return getattr(record, name, None)


# --- Summaries ---

def summarize(samples):
    """
    Count, mean HMPI, per-tier and per-metal counts, and per-metal mean HMPI.
    Keys with zero occurrences are left out of the mappings. An empty input
    gives a zeroed summary.
    """
    tier_counts = Counter()
    metal_counts = Counter()
    metal_totals = {}
    total = 0.0
    for sample in samples:
        hmpi_value = _field(sample, 'hmpi_value') or 0.0
        metal = _field(sample, 'metal')
        tier_counts[_field(sample, 'risk_level')] += 1
        metal_counts[metal] += 1
        metal_totals[metal] = metal_totals.get(metal, 0.0) + hmpi_value
        total += hmpi_value

    count = sum(metal_counts.values())
    return Summary(
        count=count,
        average_index=total / count if count else 0,
        risk_tier_counts=dict(tier_counts),
        metal_counts=dict(metal_counts),
        metal_average_index={metal: metal_totals[metal] / n for metal, n in metal_counts.items()},
    )


def high_risk_count(samples):
    """Samples in either the 'High Risk' or the 'Very High Risk' tier."""
    return sum(1 for s in samples if _field(s, 'risk_level') in HIGH_RISK_TIERS)


def alert_priority_for(risk_level):
    """'high', 'medium', or None when the tier raises no alert."""
    return ALERT_PRIORITIES.get(risk_level)


# --- Compliance ---

def compliance_rate(samples, standard_limits):
    """
    For each metal in standard_limits: how many samples of that metal exceed
    the limit (strictly greater) and the share that comply, in percent.
    A metal with no samples is 100% compliant.
    """
    results = {}
    for metal, limit in standard_limits.items():
        metal_samples = [s for s in samples if _field(s, 'metal') == metal]
        total = len(metal_samples)
        violations = sum(1 for s in metal_samples if _field(s, 'concentration') > limit)
        rate = (total - violations) / total * 100 if total else 100
        results[metal] = {'violations': violations, 'total': total, 'rate': rate, 'limit': limit}
    return results


def compliance_by_standard(samples, standards=STANDARDS):
    """Runs compliance_rate once per named standard (WHO, BBI)."""
    return {name: compliance_rate(samples, limits) for name, limits in standards.items()}


# --- Project & Alert Roll-ups ---

def project_stats(samples, alerts):
    """Card statistics for one project: samples, open alerts, mean HMPI, high-risk count."""
    summary = summarize(samples)
    return {
        'sample_count': summary.count,
        'alert_count': sum(1 for a in alerts if _field(a, 'status') == 'active'),
        'avg_hmpi': summary.average_index,
        'high_risk_count': high_risk_count(samples),
    }


def alert_stats(alerts):
    priorities = Counter(_field(a, 'priority') for a in alerts)
    return {
        'total': len(alerts),
        'active': sum(1 for a in alerts if _field(a, 'status') == 'active'),
        'high': priorities['high'],
        'medium': priorities['medium'],
        'low': priorities['low'],
    }


def filter_alerts(alerts, filter_name='all'):
    """Status filters match 'status', priority filters match 'priority'."""
    if filter_name in ('active', 'acknowledged', 'resolved'):
        return [a for a in alerts if _field(a, 'status') == filter_name]
    if filter_name in ('high', 'medium', 'low'):
        return [a for a in alerts if _field(a, 'priority') == filter_name]
    return list(alerts)


# --- Full Report ---

def build_report(samples, projects, project=None, generated_on=None):
    """
    Assembles everything the report screen and the exporters show.

    `samples` should already be scoped to `project` when one is given;
    `projects` is the full project list, used for the project count and to
    attach project names to sample rows.
    """
    samples = list(samples)
    summary = summarize(samples)
    high_risk = high_risk_count(samples)
    projects_by_id = {p['id']: p for p in projects}

    rows = []
    for sample in samples:
        row = dict(sample) if isinstance(sample, dict) else dict(sample._asdict())
        owner = projects_by_id.get(row.get('project_id'), {})
        row['project_name'] = owner.get('name', 'Unknown')
        row['location'] = ' '.join(
            part for part in (owner.get('location_district'), owner.get('location_city')) if part
        )
        row['risk_color'] = risk_color(row.get('risk_level'))
        rows.append(row)

    return {
        'project': project,
        'generated_on': (generated_on or date.today()).isoformat(),
        'summary': {
            'total_samples': summary.count,
            'average_hmpi': summary.average_index,
            'high_risk_count': high_risk,
            'high_risk_percentage': high_risk / summary.count * 100 if summary.count else 0,
            'projects': 1 if project else len(projects),
        },
        'risk_distribution': [
            {'name': level, 'value': n, 'color': risk_color(level)}
            for level, n in summary.risk_tier_counts.items()
        ],
        'metal_distribution': [
            {'name': metal, 'count': n, 'avg_hmpi': summary.metal_average_index[metal]}
            for metal, n in summary.metal_counts.items()
        ],
        'compliance': compliance_by_standard(samples),
        'needs_attention': high_risk > 0,
        'samples': rows,
    }
